from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue, slugify
from ..matchers import resource_type_matches
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

INFRA = "infra"


@register_category(INFRA, order=60)
def evaluate_infra_resources(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """Infra files are present and declare the required resource types."""
    checks = rule_set.bicep_checks
    infra_files = snapshot.infra_files(checks.infra_folder, checks.file_extensions)

    issues, compliant = [], []
    if checks.require_infra_files:
        exts = tuple(e.lower() for e in checks.file_extensions)
        listed = [p for p in snapshot.files_under(checks.infra_folder) if p.lower().endswith(exts)]
        if not listed:
            kinds = ", ".join(checks.file_extensions)
            issues.append(
                make_issue(
                    "missing-bicep",
                    INFRA,
                    f"No infrastructure files found in {checks.infra_folder}/",
                    error=f"No {kinds} files found in the {checks.infra_folder}/ directory",
                    details={"folder": checks.infra_folder, "extensions": list(checks.file_extensions)},
                    recommendation=f"Add the template's infrastructure definition under {checks.infra_folder}/.",
                )
            )
        else:
            compliant.append(
                make_compliant(
                    "bicep-files-exist",
                    INFRA,
                    f"Infrastructure files found in {checks.infra_folder}/: {len(listed)} file(s)",
                    {"count": len(listed), "files": listed},
                )
            )

    for resource in checks.required_resources:
        matched = resource_type_matches(infra_files, resource)
        slug = slugify(resource)
        if not matched:
            issues.append(
                make_issue(
                    f"bicep-missing-{slug}",
                    INFRA,
                    f'Missing required resource "{resource}" in {checks.infra_folder}/',
                    error=(
                        f'No file under {checks.infra_folder}/ declares a resource of type "{resource}" '
                        f"({len(infra_files)} file(s) scanned)"
                    ),
                    details={"resource": resource, "filesScanned": list(infra_files)},
                    recommendation=(
                        f'Add a "{resource}" resource to the infrastructure definition or remove it from '
                        "the rule set if it is not required."
                    ),
                )
            )
        else:
            compliant.append(
                make_compliant(
                    f"bicep-resource-{slug}",
                    INFRA,
                    f'Found required resource "{resource}"',
                    {"resource": resource, "files": matched},
                )
            )
    return CategoryFindings(issues=issues, compliant=compliant)

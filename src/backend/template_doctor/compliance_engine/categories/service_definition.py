from __future__ import annotations

from typing import Any, List

import yaml

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

SERVICE_DEFINITION = "serviceDefinition"


def _service_names(manifest: Any) -> List[str]:
    if not isinstance(manifest, dict):
        return []
    services = manifest.get("services")
    if not isinstance(services, dict):
        return []
    return [str(name) for name in services.keys()]


@register_category(SERVICE_DEFINITION, order=80)
def evaluate_service_definition(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """The azd manifest enumerates at least one service."""
    rules = rule_set.azure_yaml_rules
    if not rules.must_define_services:
        return CategoryFindings(skipped=True)

    path = snapshot.first_present(rules.manifest_paths)
    if path is None:
        expected = " or ".join(rules.manifest_paths)
        return CategoryFindings(
            issues=[
                make_issue(
                    "missing-azure-yaml",
                    SERVICE_DEFINITION,
                    f"Missing {expected} file",
                    error=f"No {expected} file found; services cannot be verified",
                )
            ]
        )

    content = snapshot.content_for(path)
    if content is None:
        return CategoryFindings(
            issues=[
                make_issue(
                    "azure-yaml-content-unavailable",
                    SERVICE_DEFINITION,
                    f"Could not read {path}",
                    error=f"{path} is listed but its content was not provided",
                    details={"fileName": path},
                )
            ]
        )

    try:
        manifest = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        return CategoryFindings(
            issues=[
                make_issue(
                    "azure-yaml-invalid",
                    SERVICE_DEFINITION,
                    f"{path} is not valid YAML",
                    error=str(exc),
                    details={"fileName": path},
                )
            ]
        )

    names = _service_names(manifest)
    if not names:
        return CategoryFindings(
            issues=[
                make_issue(
                    "azure-yaml-missing-services",
                    SERVICE_DEFINITION,
                    f'No "services:" defined in {path}',
                    error=f'File {path} does not define required "services:" section',
                    details={"fileName": path},
                )
            ]
        )
    return CategoryFindings(
        compliant=[
            make_compliant(
                "azure-yaml-services-defined",
                SERVICE_DEFINITION,
                f'"services:" section found in {path}',
                {"fileName": path, "services": names},
            )
        ]
    )

from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..matchers import compile_pattern, path_matches_any
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

DOCUMENTATION = "documentation"


@register_category(DOCUMENTATION, order=40)
def evaluate_documentation(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """Documentation that may live in one of several locations."""
    issues, compliant = [], []
    for requirement in rule_set.required_documentation:
        # One result per requirement, however many alternative patterns it lists.
        matched = path_matches_any(snapshot, [compile_pattern(p) for p in requirement.patterns])
        if matched is None:
            issues.append(
                make_issue(
                    f"missing-doc-{requirement.name}",
                    DOCUMENTATION,
                    requirement.message,
                    error=requirement.message,
                    details={"patterns": list(requirement.patterns)},
                )
            )
        else:
            compliant.append(
                make_compliant(
                    f"doc-{requirement.name}",
                    DOCUMENTATION,
                    f"Required documentation found: {matched}",
                    {"fileName": matched, "requirement": requirement.name},
                )
            )
    return CategoryFindings(issues=issues, compliant=compliant)

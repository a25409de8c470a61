from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..matchers import compile_pattern, path_matches_any
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

WORKFLOWS = "workflows"


@register_category(WORKFLOWS, order=30)
def evaluate_workflows(snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions) -> CategoryFindings:
    """Required GitHub workflow files, matched by path pattern."""
    issues, compliant = [], []
    for requirement in rule_set.required_workflow_files:
        matched = path_matches_any(snapshot, [compile_pattern(requirement.pattern)])
        if matched is None:
            issues.append(
                make_issue(
                    f"missing-workflow-{requirement.key}",
                    WORKFLOWS,
                    requirement.message,
                    error=requirement.message,
                    details={"pattern": requirement.pattern},
                )
            )
            continue
        compliant.append(
            make_compliant(
                f"workflow-{requirement.key}",
                WORKFLOWS,
                f"Required workflow file found: {matched}",
                {
                    "fileName": matched,
                    "patternMatched": requirement.pattern,
                    "ruleMessage": requirement.message,
                },
            )
        )
    return CategoryFindings(issues=issues, compliant=compliant)

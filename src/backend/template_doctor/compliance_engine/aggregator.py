from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence, Tuple

from .models import AnalysisResult, CategoryFindings, CategoryResult, ComplianceReport, CompliantItem, Issue


def category_percentage(compliant_count: int, issue_count: int) -> int:
    """round(100 * compliant / total), half up; an empty category is vacuously 100."""
    total = compliant_count + issue_count
    if total <= 0:
        return 100
    value = (Decimal(100) * Decimal(compliant_count) / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(value)))


def summarize(issue_count: int, percentage: int) -> str:
    if issue_count == 0:
        return f"No issues found - Compliance: {percentage}%"
    return f"Issues found - Compliance: {percentage}%"


def aggregate(
    outcomes: Sequence[Tuple[str, CategoryFindings]],
    *,
    repo_url: str,
    rule_set_name: str,
    timestamp: datetime,
) -> AnalysisResult:
    """Fold ordered per-category findings into one result.

    Only sums and concatenates; the order of `outcomes` is the order of the flat lists.
    """
    categories: Dict[str, CategoryResult] = {}
    issues: List[Issue] = []
    compliant: List[CompliantItem] = []

    for name, findings in outcomes:
        categories[name] = CategoryResult(
            enabled=not findings.skipped,
            issues=list(findings.issues),
            compliant=list(findings.compliant),
            percentage=category_percentage(len(findings.compliant), len(findings.issues)),
        )
        issues.extend(findings.issues)
        compliant.extend(findings.compliant)

    # Count-weighted over every included category, not a mean of category percentages.
    percentage = category_percentage(len(compliant), len(issues))
    return AnalysisResult(
        repo_url=repo_url,
        rule_set=rule_set_name,
        timestamp=timestamp,
        compliance=ComplianceReport(
            issues=issues,
            compliant=compliant,
            percentage=percentage,
            summary=summarize(len(issues), percentage),
            categories=categories,
        ),
    )

from __future__ import annotations

import re
from typing import List

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..models import CategoryFindings, CompliantItem, Issue, RepositorySnapshot, Severity
from ..registry import register_category

REPOSITORY_MANAGEMENT = "repositoryManagement"

ISSUE_TEMPLATE_FOLDER = ".github/issue_template/"
ISSUE_TEMPLATE_FILES = (".github/issue_template.md", ".github/issue_template.yml", ".github/issue_template.yaml")
DEV_CONTAINER_FOLDER = ".devcontainer/"
DEV_CONTAINER_CONFIGS = (".devcontainer/devcontainer.json", ".devcontainer.json")

_AZD_RE = re.compile(r"azd|Azure Developer CLI")


def _issue_template_paths(snapshot: RepositorySnapshot) -> List[str]:
    # GitHub accepts any casing for ISSUE_TEMPLATE.
    return [
        p
        for p in snapshot.files
        if p.lower().startswith(ISSUE_TEMPLATE_FOLDER) or p.lower() in ISSUE_TEMPLATE_FILES
    ]


def _check_issue_templates(snapshot: RepositorySnapshot, issues: List[Issue], compliant: List[CompliantItem]) -> None:
    found = _issue_template_paths(snapshot)
    if not found:
        issues.append(
            make_issue(
                "missing-issue-template",
                REPOSITORY_MANAGEMENT,
                "Missing GitHub issue templates",
                error="Repository should have issue templates under .github/ISSUE_TEMPLATE/",
                severity=Severity.WARNING,
                recommendation="Add issue templates so users can report bugs and request features consistently.",
            )
        )
        return
    compliant.append(
        make_compliant(
            "issue-template",
            REPOSITORY_MANAGEMENT,
            "Repository has GitHub issue templates",
            {"files": found},
        )
    )


def _check_dev_container(
    snapshot: RepositorySnapshot,
    requires_azd: bool,
    issues: List[Issue],
    compliant: List[CompliantItem],
) -> None:
    present = [p for p in snapshot.files if p.startswith(DEV_CONTAINER_FOLDER) or p == ".devcontainer.json"]
    if not present:
        issues.append(
            make_issue(
                "missing-devcontainer",
                REPOSITORY_MANAGEMENT,
                "Missing Dev Container configuration",
                error=(
                    "Repository should include a .devcontainer folder with configuration "
                    "for consistent development environments"
                ),
                severity=Severity.WARNING,
            )
        )
        return

    config_path = next((p for p in present if p.lower() in DEV_CONTAINER_CONFIGS), None)
    text = snapshot.content_for(config_path) if config_path else None
    if not requires_azd or text is None:
        compliant.append(
            make_compliant(
                "devcontainer-exists",
                REPOSITORY_MANAGEMENT,
                "Dev Container configuration exists",
                {"files": present},
            )
        )
        return

    if _AZD_RE.search(text):
        compliant.append(
            make_compliant(
                "devcontainer-azd",
                REPOSITORY_MANAGEMENT,
                "Dev Container includes Azure Developer CLI (azd)",
                {"file": config_path},
            )
        )
    else:
        issues.append(
            make_issue(
                "devcontainer-missing-azd",
                REPOSITORY_MANAGEMENT,
                "Dev Container configuration might not include azd",
                error=(
                    f"{config_path} should include the Azure Developer CLI (azd) "
                    "for a consistent development experience"
                ),
                severity=Severity.WARNING,
                details={"file": config_path},
                recommendation='Add the "ghcr.io/azure/azure-dev/azd" feature to the Dev Container.',
            )
        )


@register_category(REPOSITORY_MANAGEMENT, order=45)
def evaluate_repository_management(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """GitHub issue templates and a Dev Container that ships azd."""
    checks = rule_set.repository_management
    if checks is None:
        return CategoryFindings(skipped=True)

    issues: List[Issue] = []
    compliant: List[CompliantItem] = []
    if checks.issue_templates:
        _check_issue_templates(snapshot, issues, compliant)
    if checks.dev_container:
        _check_dev_container(snapshot, checks.dev_container_requires_azd, issues, compliant)
    return CategoryFindings(issues=issues, compliant=compliant)

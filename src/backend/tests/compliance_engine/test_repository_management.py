import pytest

from template_doctor.compliance_engine.categories import evaluate_repository_management
from template_doctor.compliance_engine.config import RepositoryManagementChecks
from template_doctor.compliance_engine.models import Severity

AZD_DEVCONTAINER = """{
  "image": "mcr.microsoft.com/devcontainers/python:3.11",
  "features": {"ghcr.io/azure/azure-dev/azd:latest": {}}
}
"""

PLAIN_DEVCONTAINER = '{"image": "mcr.microsoft.com/devcontainers/python:3.11"}\n'


def test_no_section_skips_the_category(make_snapshot, make_rule_set, options):
    findings = evaluate_repository_management(make_snapshot(files=["README.md"]), make_rule_set(), options)
    assert findings.skipped is True
    assert findings.issues == [] and findings.compliant == []


def test_bare_repository_gets_two_warnings(make_snapshot, make_rule_set, options):
    rule_set = make_rule_set(repository_management=RepositoryManagementChecks())

    findings = evaluate_repository_management(make_snapshot(files=["README.md"]), rule_set, options)

    assert [i.id for i in findings.issues] == ["missing-issue-template", "missing-devcontainer"]
    assert all(i.severity == Severity.WARNING for i in findings.issues)
    assert findings.issues[0].message == "Missing GitHub issue templates"
    assert findings.compliant == []


@pytest.mark.parametrize(
    "path",
    [
        ".github/ISSUE_TEMPLATE/bug_report.md",
        ".github/issue_template/feature.yml",
        ".github/ISSUE_TEMPLATE.md",
    ],
)
def test_issue_template_locations(make_snapshot, make_rule_set, options, path):
    rule_set = make_rule_set(repository_management=RepositoryManagementChecks(dev_container=False))

    findings = evaluate_repository_management(make_snapshot(files=[path]), rule_set, options)

    assert findings.issues == []
    assert [c.id for c in findings.compliant] == ["issue-template"]
    assert findings.compliant[0].details == {"files": [path]}


def test_devcontainer_with_azd_is_compliant(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(
        files=[".devcontainer/devcontainer.json", ".devcontainer/Dockerfile"],
        contents={".devcontainer/devcontainer.json": AZD_DEVCONTAINER},
    )
    rule_set = make_rule_set(repository_management=RepositoryManagementChecks(issue_templates=False))

    findings = evaluate_repository_management(snapshot, rule_set, options)

    assert findings.issues == []
    assert [c.id for c in findings.compliant] == ["devcontainer-azd"]
    assert findings.compliant[0].details == {"file": ".devcontainer/devcontainer.json"}


def test_devcontainer_without_azd_is_a_warning(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=[".devcontainer.json"], contents={".devcontainer.json": PLAIN_DEVCONTAINER})
    rule_set = make_rule_set(repository_management=RepositoryManagementChecks(issue_templates=False))

    findings = evaluate_repository_management(snapshot, rule_set, options)

    assert [i.id for i in findings.issues] == ["devcontainer-missing-azd"]
    assert findings.issues[0].severity == Severity.WARNING
    assert findings.issues[0].details == {"file": ".devcontainer.json"}


def test_devcontainer_without_readable_config_only_reports_presence(make_snapshot, make_rule_set, options):
    # Listed config without content, and a folder with no devcontainer.json at all.
    rule_set = make_rule_set(repository_management=RepositoryManagementChecks(issue_templates=False))
    for files in ([".devcontainer/devcontainer.json"], [".devcontainer/Dockerfile"]):
        findings = evaluate_repository_management(make_snapshot(files=files), rule_set, options)
        assert findings.issues == []
        assert [c.id for c in findings.compliant] == ["devcontainer-exists"]


def test_azd_check_can_be_switched_off(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=[".devcontainer.json"], contents={".devcontainer.json": PLAIN_DEVCONTAINER})
    checks = RepositoryManagementChecks(issue_templates=False, dev_container_requires_azd=False)

    findings = evaluate_repository_management(snapshot, make_rule_set(repository_management=checks), options)

    assert findings.issues == []
    assert [c.id for c in findings.compliant] == ["devcontainer-exists"]

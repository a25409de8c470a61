from template_doctor.compliance_engine.categories import evaluate_required_files, evaluate_required_folders
from template_doctor.compliance_engine.models import Severity


def test_required_files_reports_one_result_per_entry(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=["README.md", "azure.yaml"], contents={"README.md": "# Hi\n"})
    rule_set = make_rule_set(required_files=["README.md", "azure.yaml", "LICENSE"])

    findings = evaluate_required_files(snapshot, rule_set, options)

    assert [c.id for c in findings.compliant] == ["file-README.md", "file-azure.yaml"]
    assert findings.compliant[0].details == {"fileName": "README.md", "size": 5}
    assert findings.compliant[1].details == {"fileName": "azure.yaml"}
    assert len(findings.issues) == 1
    issue = findings.issues[0]
    assert issue.id == "missing-file-LICENSE"
    assert issue.category == "files"
    assert issue.severity == Severity.ERROR
    assert issue.security_issue is False


def test_required_files_are_case_sensitive(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=["readme.md"])
    findings = evaluate_required_files(snapshot, make_rule_set(required_files=["README.md"]), options)
    assert [i.id for i in findings.issues] == ["missing-file-README.md"]
    assert findings.compliant == []


def test_required_folders_use_prefix_match(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=["infra/main.bicep", "infra/modules/kv.bicep", "srcfile.txt"])
    rule_set = make_rule_set(required_folders=["infra", "src"])

    findings = evaluate_required_folders(snapshot, rule_set, options)

    assert [c.id for c in findings.compliant] == ["folder-infra"]
    assert findings.compliant[0].details == {"folderPath": "infra", "fileCount": 2}
    assert [i.id for i in findings.issues] == ["missing-folder-src"]


def test_empty_requirements_produce_nothing(make_snapshot, make_rule_set, options):
    snapshot = make_snapshot(files=["README.md"])
    rule_set = make_rule_set()
    assert evaluate_required_files(snapshot, rule_set, options).issues == []
    assert evaluate_required_folders(snapshot, rule_set, options).compliant == []

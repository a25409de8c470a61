import pytest

from template_doctor.compliance_engine import ComplianceAnalyzer, analyze
from template_doctor.compliance_engine.config import AnalyzerOptions, WorkflowRequirement
from template_doctor.compliance_engine.errors import ConfigurationError, InputError
from template_doctor.compliance_engine.findings import make_issue
from template_doctor.compliance_engine.models import CategoryFindings
from template_doctor.compliance_engine.registry import CategoryRegistry

ALL_CATEGORIES = [
    "files",
    "folders",
    "workflows",
    "documentation",
    "repositoryManagement",
    "readme",
    "infra",
    "security",
    "serviceDefinition",
    "deprecatedModels",
]


@pytest.fixture
def dod_scenario(make_snapshot):
    return make_snapshot(
        files=["azure.yaml", "README.md"],
        folders=["infra"],
        contents={"README.md": "# Overview"},
    )


def test_dod_scenario_is_partially_compliant(analyzer, dod_scenario, fixed_now):
    result = analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set="dod"))
    report = result.compliance

    assert list(report.categories) == ALL_CATEGORIES
    assert result.rule_set == "dod"
    assert result.timestamp == fixed_now

    folders = report.categories["folders"]
    assert [c.id for c in folders.compliant] == ["folder-infra"]
    assert {i.id for i in folders.issues} == {"missing-folder-src", "missing-folder-.github"}

    assert [i.id for i in report.categories["files"].issues] == ["missing-file-LICENSE"]
    assert len(report.categories["workflows"].issues) == 2
    assert "missing-doc-code-of-conduct" in [i.id for i in report.categories["documentation"].issues]
    readme_issue_ids = [i.id for i in report.categories["readme"].issues]
    assert "readme-missing-section-features" in readme_issue_ids
    assert "readme-missing-section-getting-started" in readme_issue_ids
    assert [i.id for i in report.categories["infra"].issues][0] == "missing-bicep"
    assert {i.id for i in report.categories["repositoryManagement"].issues} == {
        "missing-issue-template",
        "missing-devcontainer",
    }

    assert 0 < report.percentage < 100
    assert report.summary == f"Issues found - Compliance: {report.percentage}%"


def test_snapshot_mapping_accepts_content_key(analyzer):
    payload = {"files": ["azure.yaml", "README.md"], "folders": ["infra"], "content": {"README.md": "# Overview"}}
    result = analyzer.analyze(payload, {"ruleSet": "dod", "categories": ["readme"]})
    ids = [i.id for i in result.compliance.issues]
    assert "missing-readme" not in ids
    assert "readme-content-unavailable" not in ids


def test_analysis_is_idempotent_except_timestamp(dod_scenario):
    first = ComplianceAnalyzer().analyze(dod_scenario)
    second = ComplianceAnalyzer().analyze(dod_scenario)
    assert first.compliance == second.compliance
    assert first.rule_set == second.rule_set


def test_disabling_a_category_leaves_others_unchanged(analyzer, dod_scenario):
    full = analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set="dod"))
    subset = [c for c in ALL_CATEGORIES if c != "readme"]
    partial = analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set="dod", categories=subset))

    assert "readme" not in partial.compliance.categories
    assert all(i.category != "readme" for i in partial.compliance.issues)
    assert all(c.category != "readme" for c in partial.compliance.compliant)
    for name in subset:
        assert partial.compliance.categories[name] == full.compliance.categories[name]


def test_categories_run_in_declared_order_regardless_of_request_order(analyzer, dod_scenario):
    result = analyzer.analyze(dod_scenario, AnalyzerOptions(categories="readme, files"))
    assert list(result.compliance.categories) == ["files", "readme"]


def test_toggles_exclude_categories(analyzer, dod_scenario):
    no_ai = analyzer.analyze(dod_scenario, AnalyzerOptions(ai_deprecation_check_enabled=False))
    assert "deprecatedModels" not in no_ai.compliance.categories
    assert "serviceDefinition" in no_ai.compliance.categories

    no_azd = analyzer.analyze(dod_scenario, AnalyzerOptions(azure_developer_cli_enabled=False))
    assert "deprecatedModels" not in no_azd.compliance.categories
    assert "serviceDefinition" not in no_azd.compliance.categories


def test_skipped_category_reports_disabled(analyzer, dod_scenario):
    result = analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set="custom"))
    service = result.compliance.categories["serviceDefinition"]
    assert service.enabled is False
    assert service.issues == [] and service.compliant == []
    assert result.compliance.categories["security"].enabled is False
    assert result.compliance.categories["repositoryManagement"].enabled is False


def test_inline_rule_set_dict(analyzer, make_snapshot):
    rule_set = {
        "name": "inline",
        "requiredFiles": ["README.md"],
        "bicepChecks": {"infraFolder": "infra"},
        "azureYamlRules": {"mustDefineServices": False},
    }
    result = analyzer.analyze(make_snapshot(files=["README.md"]), AnalyzerOptions(rule_set=rule_set, categories=["files"]))
    assert result.rule_set == "inline"
    assert result.compliance.percentage == 100
    assert result.compliance.summary == "No issues found - Compliance: 100%"


def test_unknown_preset_is_configuration_error(analyzer, dod_scenario):
    with pytest.raises(ConfigurationError) as excinfo:
        analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set="strictest"))
    assert excinfo.value.to_dict()["error"]["code"] == "configuration_error"


def test_rule_set_missing_sections_is_configuration_error(analyzer, dod_scenario):
    with pytest.raises(ConfigurationError) as excinfo:
        analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set={"name": "broken"}))
    assert excinfo.value.details["missing"] == ["bicepChecks", "azureYamlRules"]


def test_invalid_pattern_is_configuration_error(analyzer, dod_scenario, make_rule_set):
    rule_set = make_rule_set(
        required_workflow_files=[WorkflowRequirement(pattern="(unclosed", message="never used")]
    )
    with pytest.raises(ConfigurationError):
        analyzer.analyze(dod_scenario, AnalyzerOptions(rule_set=rule_set))


def test_unknown_category_is_configuration_error(analyzer, dod_scenario):
    with pytest.raises(ConfigurationError) as excinfo:
        analyzer.analyze(dod_scenario, AnalyzerOptions(categories=["files", "licenses"]))
    assert excinfo.value.details["unknown"] == ["licenses"]


@pytest.mark.parametrize("snapshot", [{"files": []}, {"files": ["", "./"]}, {"files": 5}, ["README.md"]])
def test_unusable_snapshot_is_input_error(analyzer, snapshot):
    with pytest.raises(InputError):
        analyzer.analyze(snapshot)


@pytest.mark.parametrize("value", ["dod", ["files"], 3])
def test_non_mapping_options_are_configuration_error(analyzer, dod_scenario, value):
    with pytest.raises(ConfigurationError) as excinfo:
        analyzer.analyze(dod_scenario, value)
    assert excinfo.value.to_dict()["error"]["code"] == "configuration_error"


def test_module_level_analyze_rejects_preset_name_as_options(dod_scenario):
    with pytest.raises(ConfigurationError):
        analyze(dod_scenario, "dod")


def test_configuration_is_checked_before_snapshot(analyzer):
    with pytest.raises(ConfigurationError):
        analyzer.analyze({"files": []}, AnalyzerOptions(rule_set="nope"))


def test_custom_registry_and_module_level_analyze(make_snapshot):
    custom = CategoryRegistry()

    def always_fails(snapshot, rule_set, options):
        return CategoryFindings(issues=[make_issue("always", "alwaysFails", "always fails")])

    custom.register("alwaysFails", 1, always_fails)
    result = ComplianceAnalyzer(registry=custom).analyze(make_snapshot(files=["a.txt"]))
    assert list(result.compliance.categories) == ["alwaysFails"]
    assert result.compliance.percentage == 0

    default = analyze(make_snapshot(files=["a.txt"]))
    assert list(default.compliance.categories) == ALL_CATEGORIES

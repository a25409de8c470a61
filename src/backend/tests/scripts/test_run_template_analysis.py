import json
import logging

import pytest

from scripts.run_template_analysis import main


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "files": ["azure.yaml", "README.md"],
                "folders": ["infra"],
                "contents": {"README.md": "# Overview"},
            }
        )
    )
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TEMPLATE_DOCTOR_DEFAULT_RULESET", "DEPRECATED_MODELS", "TEMPLATE_DOCTOR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    # main() installs a handler bound to the captured stderr of the current test.
    logger = logging.getLogger("template_doctor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_cli_writes_json_and_markdown(tmp_path, snapshot_file):
    out_json = tmp_path / "out" / "result.json"
    out_md = tmp_path / "out" / "result.md"

    code = main(
        [
            "--snapshot",
            str(snapshot_file),
            "--rule-set",
            "dod",
            "--repo-url",
            "https://example.test/template",
            "--out",
            str(out_json),
            "--markdown",
            str(out_md),
        ]
    )

    assert code == 0
    payload = json.loads(out_json.read_text())
    assert payload["repoUrl"] == "https://example.test/template"
    assert payload["ruleSet"] == "dod"
    assert 0 < payload["compliance"]["percentage"] < 100
    markdown = out_md.read_text()
    assert markdown.startswith("# Template Compliance: https://example.test/template")
    assert "### missing-file-LICENSE - error" in markdown


def test_cli_prints_json_to_stdout_for_repo_path(tmp_path, capsys):
    (tmp_path / "README.md").write_text("# Hi\n")
    code = main(["--repo-path", str(tmp_path), "--categories", "files"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert list(payload["compliance"]["categories"]) == ["files"]


def test_cli_returns_2_on_configuration_error(snapshot_file, capsys):
    code = main(["--snapshot", str(snapshot_file), "--rule-set", "nope"])

    assert code == 2
    err = capsys.readouterr().err
    envelope = json.loads(err[err.index("{") :])
    assert envelope["ok"] is False
    assert envelope["error"]["code"] == "configuration_error"


def test_cli_returns_2_on_input_error(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"files": []}))
    assert main(["--snapshot", str(path)]) == 2

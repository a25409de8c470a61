import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import template_doctor...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import datetime, timezone

import pytest

from template_doctor.compliance_engine import ComplianceAnalyzer
from template_doctor.compliance_engine.config import AnalyzerOptions, AzureYamlRules, BicepChecks, RuleSet
from template_doctor.compliance_engine.models import RepositorySnapshot


FIXED_NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def options() -> AnalyzerOptions:
    return AnalyzerOptions()


@pytest.fixture
def make_snapshot():
    def _make(*, files=(), contents=None, folders=()) -> RepositorySnapshot:
        return RepositorySnapshot(files=list(files), folders=list(folders), contents=dict(contents or {}))

    return _make


@pytest.fixture
def make_rule_set():
    """Empty rule set; tests switch on only the sections they exercise."""

    def _make(**overrides) -> RuleSet:
        data = {
            "name": "test",
            "bicep_checks": BicepChecks(),
            "azure_yaml_rules": AzureYamlRules(must_define_services=False),
        }
        data.update(overrides)
        return RuleSet(**data)

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def analyzer(fixed_now) -> ComplianceAnalyzer:
    return ComplianceAnalyzer(clock=lambda: fixed_now)

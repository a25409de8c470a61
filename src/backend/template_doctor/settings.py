from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, List, Optional

from dotenv import load_dotenv

from template_doctor.compliance_engine.config import AnalyzerOptions


load_dotenv()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AnalyzerSettings:
    default_rule_set: str
    deprecated_models: Optional[List[str]]
    ai_deprecation_check_enabled: bool
    azure_developer_cli_enabled: bool
    log_level: str

    def to_options(
        self,
        *,
        rule_set: Any = None,
        categories: Optional[List[str]] = None,
        repo_url: str = "",
    ) -> AnalyzerOptions:
        return AnalyzerOptions(
            rule_set=rule_set if rule_set is not None else self.default_rule_set,
            categories=categories,
            repo_url=repo_url,
            deprecated_models=self.deprecated_models,
            ai_deprecation_check_enabled=self.ai_deprecation_check_enabled,
            azure_developer_cli_enabled=self.azure_developer_cli_enabled,
        )


def get_settings() -> AnalyzerSettings:
    """
    Load analyzer defaults from environment variables.

    Reads:
      TEMPLATE_DOCTOR_DEFAULT_RULESET, DEPRECATED_MODELS,
      AI_DEPRECATION_CHECK_ENABLED, AZURE_DEVELOPER_CLI_ENABLED,
      TEMPLATE_DOCTOR_LOG_LEVEL
    """
    return AnalyzerSettings(
        default_rule_set=os.getenv("TEMPLATE_DOCTOR_DEFAULT_RULESET", "dod").strip().lower() or "dod",
        deprecated_models=_csv_env("DEPRECATED_MODELS"),
        ai_deprecation_check_enabled=_bool_env("AI_DEPRECATION_CHECK_ENABLED", True),
        azure_developer_cli_enabled=_bool_env("AZURE_DEVELOPER_CLI_ENABLED", True),
        log_level=os.getenv("TEMPLATE_DOCTOR_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


def _csv_env(name: str) -> Optional[List[str]]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}.")

from __future__ import annotations

from typing import Any, Dict, Optional


class AnalysisError(RuntimeError):
    """Base class for failures raised by the analyzer before any category runs."""

    code = "analysis_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            },
        }


class ConfigurationError(AnalysisError):
    """Malformed or incomplete rule set, unknown preset or unknown category."""

    code = "configuration_error"


class InputError(AnalysisError):
    """Empty or unusable repository snapshot."""

    code = "input_error"

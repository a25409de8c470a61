from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from template_doctor.compliance_engine import ComplianceAnalyzer, preset_names
from template_doctor.compliance_engine.errors import AnalysisError, ConfigurationError
from template_doctor.compliance_engine.registry import registry
from template_doctor.settings import AnalyzerSettings, get_settings


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    repo_url: str = ""
    rule_set: Optional[Union[str, Dict[str, Any]]] = None
    categories: Optional[List[str]] = None
    snapshot: Dict[str, Any] = Field(default_factory=dict)
    deprecated_models: Optional[List[str]] = None
    ai_deprecation_check_enabled: Optional[bool] = None
    azure_developer_cli_enabled: Optional[bool] = None


def _status_for(exc: AnalysisError) -> int:
    if isinstance(exc, ConfigurationError):
        return 400
    return 422


def _load_settings() -> AnalyzerSettings:
    try:
        return get_settings()
    except ValueError as exc:
        logger.error("Invalid analyzer settings: %s", exc)
        detail = {"ok": False, "error": {"code": "settings_error", "message": str(exc), "details": {}}}
        raise HTTPException(status_code=500, detail=detail) from exc


@router.get("/catalog")
def analyze_catalog():
    return {
        "ruleSets": preset_names(),
        "categories": [{"name": c.name, "description": c.description} for c in registry.ordered()],
    }


@router.post("")
def analyze_template(request: AnalyzeRequest):
    settings = _load_settings()
    options = settings.to_options(
        rule_set=request.rule_set,
        categories=request.categories,
        repo_url=request.repo_url,
    )
    overrides: Dict[str, Any] = {}
    if request.deprecated_models is not None:
        overrides["deprecated_models"] = request.deprecated_models
    if request.ai_deprecation_check_enabled is not None:
        overrides["ai_deprecation_check_enabled"] = request.ai_deprecation_check_enabled
    if request.azure_developer_cli_enabled is not None:
        overrides["azure_developer_cli_enabled"] = request.azure_developer_cli_enabled
    if overrides:
        options = options.model_copy(update=overrides)

    try:
        result = ComplianceAnalyzer().analyze(request.snapshot, options)
    except AnalysisError as exc:
        logger.info("Analysis rejected (%s): %s", exc.code, exc.message)
        raise HTTPException(status_code=_status_for(exc), detail=exc.to_dict()) from exc
    return result.to_json_dict()


def create_app() -> FastAPI:
    app = FastAPI(title="Template Doctor")
    app.include_router(router)
    return app

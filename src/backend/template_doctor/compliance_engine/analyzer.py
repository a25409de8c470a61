from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .aggregator import aggregate
from .categories import DEPRECATED_MODELS, SERVICE_DEFINITION
from .config import AnalyzerOptions, RuleSet
from .errors import ConfigurationError, InputError
from .matchers import compile_pattern
from .models import AnalysisResult, RepositorySnapshot
from .presets import get_preset
from .registry import CategoryRegistry, RegisteredCategory, registry as default_registry

logger = logging.getLogger(__name__)

SnapshotLike = Union[RepositorySnapshot, Mapping[str, Any]]
OptionsLike = Union[AnalyzerOptions, Mapping[str, Any], None]


def _validation_details(exc: ValidationError) -> dict:
    return {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]}


def resolve_rule_set(value: Union[str, RuleSet, Mapping[str, Any]]) -> RuleSet:
    if isinstance(value, RuleSet):
        rule_set = value
    elif isinstance(value, str):
        rule_set = get_preset(value)
    elif isinstance(value, Mapping):
        try:
            rule_set = RuleSet.model_validate(dict(value))
        except ValidationError as exc:
            raise ConfigurationError("Inline rule set is malformed", _validation_details(exc)) from exc
    else:
        raise ConfigurationError(f"Unsupported rule set value of type {type(value).__name__}")

    missing = rule_set.missing_sections()
    if missing:
        raise ConfigurationError(
            f"Rule set '{rule_set.name}' is missing required section(s): {', '.join(missing)}",
            {"ruleSet": rule_set.name, "missing": missing},
        )

    patterns = [w.pattern for w in rule_set.required_workflow_files]
    patterns.extend(p for doc in rule_set.required_documentation for p in doc.patterns)
    for pattern in patterns:
        try:
            compile_pattern(pattern)
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid pattern in rule set '{rule_set.name}': {pattern}",
                {"ruleSet": rule_set.name, "pattern": pattern, "reason": str(exc)},
            ) from exc
    return rule_set


def resolve_snapshot(value: SnapshotLike) -> RepositorySnapshot:
    if isinstance(value, RepositorySnapshot):
        snapshot = value
    elif isinstance(value, Mapping):
        try:
            snapshot = RepositorySnapshot.model_validate(dict(value))
        except ValidationError as exc:
            raise InputError("Repository snapshot is malformed", _validation_details(exc)) from exc
    else:
        raise InputError(f"Unsupported snapshot value of type {type(value).__name__}")

    if not snapshot.files:
        raise InputError("Repository snapshot contains no file paths")
    return snapshot


def resolve_options(value: OptionsLike) -> AnalyzerOptions:
    if value is None:
        return AnalyzerOptions()
    if isinstance(value, AnalyzerOptions):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError(
            f"Unsupported analyzer options value of type {type(value).__name__}",
            {"type": type(value).__name__},
        )
    try:
        return AnalyzerOptions.model_validate(dict(value))
    except ValidationError as exc:
        raise ConfigurationError("Analyzer options are malformed", _validation_details(exc)) from exc


class ComplianceAnalyzer:
    def __init__(
        self,
        registry: Optional[CategoryRegistry] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._registry = registry if registry is not None else default_registry
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve_categories(self, options: AnalyzerOptions) -> List[RegisteredCategory]:
        known = self._registry.names()
        if options.categories is None:
            requested = set(known)
        else:
            unknown = [c for c in options.categories if c not in self._registry]
            if unknown:
                raise ConfigurationError(
                    f"Unknown categor{'y' if len(unknown) == 1 else 'ies'}: {', '.join(unknown)}",
                    {"unknown": unknown, "available": known},
                )
            requested = set(options.categories)

        if not options.azure_developer_cli_enabled:
            requested -= {SERVICE_DEFINITION, DEPRECATED_MODELS}
        if not options.ai_deprecation_check_enabled:
            requested.discard(DEPRECATED_MODELS)
        return [c for c in self._registry.ordered() if c.name in requested]

    def analyze(self, snapshot: SnapshotLike, options: OptionsLike = None) -> AnalysisResult:
        opts = resolve_options(options)
        rule_set = resolve_rule_set(opts.rule_set)
        repo = resolve_snapshot(snapshot)
        categories = self.resolve_categories(opts)

        logger.debug(
            "Analyzing %s with rule set %s (%d files, categories=%s)",
            opts.repo_url or "<snapshot>",
            rule_set.name,
            len(repo.files),
            [c.name for c in categories],
        )
        outcomes = []
        for category in categories:
            findings = category.evaluate(repo, rule_set, opts)
            logger.debug(
                "Category %s: %d compliant, %d issue(s)%s",
                category.name,
                len(findings.compliant),
                len(findings.issues),
                " (skipped)" if findings.skipped else "",
            )
            outcomes.append((category.name, findings))

        result = aggregate(
            outcomes,
            repo_url=opts.repo_url,
            rule_set_name=rule_set.name,
            timestamp=self._clock(),
        )
        logger.info(
            "Analysis of %s with rule set %s: %s",
            opts.repo_url or "<snapshot>",
            rule_set.name,
            result.compliance.summary,
        )
        return result


def analyze(snapshot: SnapshotLike, options: OptionsLike = None) -> AnalysisResult:
    return ComplianceAnalyzer().analyze(snapshot, options)

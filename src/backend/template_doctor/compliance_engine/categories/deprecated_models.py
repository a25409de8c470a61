from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Dict, List

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue, slugify
from ..matchers import deprecated_token_present
from ..models import CategoryFindings, RepositorySnapshot, Severity
from ..registry import register_category

DEPRECATED_MODELS = "deprecatedModels"


def _model_reference_blobs(snapshot: RepositorySnapshot, rule_set: RuleSet) -> Dict[str, str]:
    """Manifest plus every provided content whose path matches a model-reference glob, in snapshot order."""
    manifests = set(rule_set.azure_yaml_rules.manifest_paths)
    blobs: Dict[str, str] = {}
    listed = set(snapshot.files)
    ordered = list(snapshot.files) + [p for p in snapshot.contents if p not in listed]
    for path in ordered:
        text = snapshot.content_for(path)
        if text is None:
            continue
        if path in manifests or any(fnmatchcase(path, g) for g in rule_set.model_reference_globs):
            blobs[path] = text
    return blobs


@register_category(DEPRECATED_MODELS, order=90)
def evaluate_deprecated_models(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """AI model identifiers that are retired or scheduled for retirement."""
    tokens: List[str] = list(
        options.deprecated_models if options.deprecated_models is not None else rule_set.deprecated_models
    )
    blobs = _model_reference_blobs(snapshot, rule_set)

    # Matching is case-insensitive; the first spelling of a token is reported.
    unique: Dict[str, str] = {}
    for token in tokens:
        if token:
            unique.setdefault(token.lower(), token)

    issues = []
    for token in unique.values():
        files = [path for path, text in blobs.items() if deprecated_token_present(text, [token])]
        if not files:
            continue
        issues.append(
            make_issue(
                f"deprecated-model-{slugify(token)}",
                DEPRECATED_MODELS,
                f"Deprecated model referenced: {token}",
                error=f"{token} is referenced in {', '.join(files)}",
                severity=Severity.WARNING,
                details={"model": token, "files": files},
                recommendation=f"Replace {token} with a currently supported model version.",
            )
        )
    if issues:
        return CategoryFindings(issues=issues)

    # One summary item whether zero or many tokens were checked.
    return CategoryFindings(
        compliant=[
            make_compliant(
                "deprecated-models-none-found",
                DEPRECATED_MODELS,
                "No deprecated model references found",
                {"modelsChecked": tokens, "filesScanned": len(blobs)},
            )
        ]
    )

from __future__ import annotations

from typing import Protocol

from .config import AnalyzerOptions, RuleSet
from .models import CategoryFindings, RepositorySnapshot


class CategoryEvaluator(Protocol):
    def __call__(
        self,
        snapshot: RepositorySnapshot,
        rule_set: RuleSet,
        options: AnalyzerOptions,
    ) -> CategoryFindings:  # pragma: no cover
        ...

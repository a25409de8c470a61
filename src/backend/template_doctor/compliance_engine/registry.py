from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

from .evaluator import CategoryEvaluator


@dataclass(frozen=True)
class RegisteredCategory:
    name: str
    order: int
    evaluate: CategoryEvaluator
    description: str = ""


class CategoryRegistry:
    def __init__(self):
        self._categories: Dict[str, RegisteredCategory] = {}

    def register(self, name: str, order: int, evaluate: CategoryEvaluator, description: str = "") -> None:
        if not name:
            raise ValueError("Category evaluator missing name")
        if name in self._categories:
            raise ValueError(f"Duplicate category registered: {name}")
        self._categories[name] = RegisteredCategory(name=name, order=order, evaluate=evaluate, description=description)

    def get(self, name: str) -> RegisteredCategory:
        return self._categories[name]

    def __contains__(self, name: object) -> bool:
        return name in self._categories

    def ordered(self) -> List[RegisteredCategory]:
        return sorted(self._categories.values(), key=lambda c: (c.order, c.name))

    def names(self) -> List[str]:
        return [c.name for c in self.ordered()]


registry = CategoryRegistry()


def register_category(name: str, *, order: int, description: str = "") -> Callable[[CategoryEvaluator], CategoryEvaluator]:
    def _decorator(fn: CategoryEvaluator) -> CategoryEvaluator:
        registry.register(name, order, fn, description or _first_line(fn.__doc__))
        return fn

    return _decorator


def _first_line(doc: str | None) -> str:
    lines = (doc or "").strip().splitlines()
    return lines[0] if lines else ""

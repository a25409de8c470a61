from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field

from .config import RuleSet
from .presets import get_preset, preset_names
from .registry import registry

# Ensure built-in categories are imported/registered when generating a catalog.
from . import categories as _builtin_categories  # noqa: F401


class CategoryCatalogEntry(BaseModel):
    name: str
    order: int
    description: str = ""
    module: str
    function_name: str


class PresetCatalogEntry(BaseModel):
    name: str
    description: str = ""
    rule_counts: Dict[str, int] = Field(default_factory=dict)
    rule_set: Dict[str, Any]


class Catalog(BaseModel):
    categories: List[CategoryCatalogEntry] = Field(default_factory=list)
    presets: List[PresetCatalogEntry] = Field(default_factory=list)
    rule_set_schema: Dict[str, Any] = Field(default_factory=dict)


def _repository_management_count(rule_set: RuleSet) -> int:
    checks = rule_set.repository_management
    if checks is None:
        return 0
    return int(checks.issue_templates) + int(checks.dev_container)


def _rule_counts(rule_set: RuleSet) -> Dict[str, int]:
    readme = rule_set.readme_requirements
    return {
        "files": len(rule_set.required_files),
        "folders": len(rule_set.required_folders),
        "workflows": len(rule_set.required_workflow_files),
        "documentation": len(rule_set.required_documentation),
        "repositoryManagement": _repository_management_count(rule_set),
        "readmeHeadings": len(readme.required_headings) if readme else 0,
        "infraResources": len(rule_set.bicep_checks.required_resources) if rule_set.bicep_checks else 0,
        "deprecatedModels": len(rule_set.deprecated_models),
    }


def build_catalog() -> Catalog:
    categories = [
        CategoryCatalogEntry(
            name=c.name,
            order=c.order,
            description=c.description,
            module=getattr(c.evaluate, "__module__", ""),
            function_name=getattr(c.evaluate, "__name__", ""),
        )
        for c in registry.ordered()
    ]

    presets = []
    for name in preset_names():
        rule_set = get_preset(name)
        presets.append(
            PresetCatalogEntry(
                name=name,
                description=rule_set.description,
                rule_counts=_rule_counts(rule_set),
                rule_set=rule_set.model_dump(mode="json", by_alias=True),
            )
        )

    schema = RuleSet.model_json_schema(by_alias=True)
    return Catalog(categories=categories, presets=presets, rule_set_schema=schema)


def _dump_json(catalog: Dict[str, Any]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: Dict[str, Any]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a catalog of compliance categories and rule set presets.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = build_catalog().model_dump()
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()

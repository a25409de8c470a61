from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class FrozenModel(BaseModel):
    # snake_case in Python, camelCase on the wire (repoUrl, securityIssue, bicepChecks, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


def normalize_path(path: str) -> str:
    value = str(path).strip().replace("\\", "/")
    while value.startswith("./"):
        value = value[2:]
    while "//" in value:
        value = value.replace("//", "/")
    return value.strip("/")


def _normalize_paths(paths: Iterable[str]) -> Tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for raw in paths:
        path = normalize_path(raw)
        if not path or path in seen:
            continue
        seen.add(path)
        out.append(path)
    return tuple(out)


class RepositorySnapshot(FrozenModel):
    """Read-only view of a repository: ordered file paths plus selected decoded contents.

    Built once per analysis by a collaborator (local checkout, JSON file, HTTP payload).
    Paths are case-sensitive; contents for paths that are not listed are only reachable
    through `content_for`.
    """

    files: Tuple[str, ...] = ()
    folders: Tuple[str, ...] = ()
    # Payloads may also spell this key "content".
    contents: Dict[str, str] = Field(default_factory=dict, validation_alias=AliasChoices("contents", "content"))

    @field_validator("files", "folders", mode="before")
    @classmethod
    def _normalize_path_list(cls, value: Any) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError("expected a list of paths")
        if not all(isinstance(p, str) for p in value):
            raise ValueError("paths must be strings")
        return _normalize_paths(value)

    @field_validator("contents", mode="before")
    @classmethod
    def _normalize_content_keys(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("expected a mapping of path to text")
        return {normalize_path(k): v for k, v in value.items() if normalize_path(k)}

    def has_file(self, path: str) -> bool:
        return path in self.files

    def content_for(self, path: str) -> Optional[str]:
        return self.contents.get(path)

    def first_present(self, paths: Iterable[str]) -> Optional[str]:
        for path in paths:
            if self.has_file(path) or path in self.contents:
                return path
        return None

    def files_under(self, prefix: str) -> List[str]:
        needle = normalize_path(prefix) + "/"
        return [p for p in self.files if p.startswith(needle)]

    def infra_files(self, folder: str, extensions: Iterable[str]) -> Dict[str, str]:
        exts = tuple(e.lower() for e in extensions)
        out: Dict[str, str] = {}
        for path in self.files_under(folder):
            if not path.lower().endswith(exts):
                continue
            text = self.content_for(path)
            if text is not None:
                out[path] = text
        return out


class Issue(FrozenModel):
    id: str
    severity: Severity = Severity.ERROR
    category: str
    message: str
    error: str = ""
    details: Optional[Dict[str, Any]] = None
    recommendation: Optional[str] = None
    security_issue: bool = False


class CompliantItem(FrozenModel):
    id: str
    category: str
    message: str
    details: Optional[Dict[str, Any]] = None


class CategoryFindings(FrozenModel):
    """What one evaluator produced. `skipped` marks a check that did not apply."""

    issues: List[Issue] = Field(default_factory=list)
    compliant: List[CompliantItem] = Field(default_factory=list)
    skipped: bool = False


class CategoryResult(FrozenModel):
    enabled: bool = True
    issues: List[Issue] = Field(default_factory=list)
    compliant: List[CompliantItem] = Field(default_factory=list)
    percentage: int = 100


class ComplianceReport(FrozenModel):
    issues: List[Issue] = Field(default_factory=list)
    compliant: List[CompliantItem] = Field(default_factory=list)
    percentage: int = 100
    summary: str = ""
    categories: Dict[str, CategoryResult] = Field(default_factory=dict)


class AnalysisResult(FrozenModel):
    repo_url: str = ""
    rule_set: str
    timestamp: datetime
    compliance: ComplianceReport

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

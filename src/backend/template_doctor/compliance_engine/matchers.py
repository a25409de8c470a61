"""Small, pure predicates shared by the category evaluators.

Every function here is total on well-formed input: no I/O, no exceptions, no state
beyond the regex cache.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

from .models import RepositorySnapshot, normalize_path

PatternLike = Union[str, Pattern[str]]

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(```|~~~)")
_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\([^)]*\)"  # ![alt](src)
    r"|!\[[^\]]*\]\[[^\]]*\]"  # ![alt][ref]
    r"|<img\b[^>]*>",
    re.IGNORECASE,
)
_BICEP_RESOURCE_RE = re.compile(r"^[ \t]*resource[ \t]+\w+[ \t]+'([^'@]+)(?:@[^']*)?'", re.MULTILINE)
_ARM_TYPE_RE = re.compile(r"\"type\"\s*:\s*\"([^\"@]+)(?:@[^\"]*)?\"")


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _as_pattern(pattern: PatternLike) -> Pattern[str]:
    if isinstance(pattern, str):
        return compile_pattern(pattern)
    return pattern


def file_exists(snapshot: RepositorySnapshot, path: str) -> bool:
    return snapshot.has_file(path)


def folder_exists(snapshot: RepositorySnapshot, prefix: str) -> bool:
    folder = normalize_path(prefix)
    if folder in snapshot.folders:
        return True
    needle = folder + "/"
    return any(p.startswith(needle) for p in snapshot.files)


def path_matches_any(snapshot: RepositorySnapshot, patterns: Iterable[PatternLike]) -> Optional[str]:
    compiled = [_as_pattern(p) for p in patterns]
    if not compiled:
        return None
    for path in snapshot.files:
        if any(p.search(path) for p in compiled):
            return path
    return None


@dataclass(frozen=True)
class MarkdownHeading:
    level: int
    text: str
    line_index: int


@dataclass(frozen=True)
class HeadingSection:
    heading: MarkdownHeading
    lines: Tuple[str, ...]

    @property
    def has_image(self) -> bool:
        return any(_IMAGE_RE.search(line) for line in self.lines)


def _scan_headings(markdown: str) -> Tuple[List[str], List[MarkdownHeading]]:
    lines = markdown.splitlines()
    headings: List[MarkdownHeading] = []
    fence: Optional[str] = None
    for idx, line in enumerate(lines):
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif fence == marker:
                fence = None
            continue
        if fence is not None:
            continue
        match = _HEADING_RE.match(line)
        if match:
            headings.append(MarkdownHeading(level=len(match.group(1)), text=match.group(2).strip(), line_index=idx))
    return lines, headings


def parse_markdown_headings(markdown: str) -> List[MarkdownHeading]:
    return _scan_headings(markdown or "")[1]


def heading_section(markdown: str, heading_text: str) -> Optional[HeadingSection]:
    """Return the lines under `heading_text` up to the next heading of equal or higher level."""
    lines, headings = _scan_headings(markdown or "")
    wanted = heading_text.strip()
    for pos, heading in enumerate(headings):
        if heading.text != wanted:
            continue
        end = len(lines)
        for later in headings[pos + 1 :]:
            if later.level <= heading.level:
                end = later.line_index
                break
        return HeadingSection(heading=heading, lines=tuple(lines[heading.line_index + 1 : end]))
    return None


def heading_present(markdown: str, heading_text: str) -> bool:
    wanted = heading_text.strip()
    return any(h.text == wanted for h in parse_markdown_headings(markdown))


def section_has_image(markdown: str, heading_text: str) -> Optional[bool]:
    section = heading_section(markdown, heading_text)
    if section is None:
        return None
    return section.has_image


def declared_resource_types(text: str) -> List[str]:
    found = [m.group(1).strip() for m in _BICEP_RESOURCE_RE.finditer(text)]
    found.extend(m.group(1).strip() for m in _ARM_TYPE_RE.finditer(text))
    return found


def resource_type_matches(infra_files: Mapping[str, str], resource_type: str) -> List[str]:
    """Infra files declaring a resource whose type starts with `resource_type` (case-insensitive)."""
    wanted = resource_type.strip().lower()
    if not wanted:
        return []
    matched = []
    for path, text in infra_files.items():
        if any(t.lower().startswith(wanted) for t in declared_resource_types(text or "")):
            matched.append(path)
    return matched


def resource_type_present(infra_files: Mapping[str, str], resource_type: str) -> bool:
    return bool(resource_type_matches(infra_files, resource_type))


@lru_cache(maxsize=256)
def _token_patterns(token: str) -> Tuple[Pattern[str], Pattern[str]]:
    escaped = re.escape(token)
    quoted = re.compile(rf"([\"'`]){escaped}\1", re.IGNORECASE)
    # Unquoted YAML/env value on a line that is not a comment: `model: token`, `MODEL=token`.
    value = re.compile(
        rf"^[ \t]*(?![#;/])[^\n#]*?[:=][ \t]*{escaped}[ \t]*(?:#.*)?$",
        re.IGNORECASE | re.MULTILINE,
    )
    return quoted, value


def deprecated_token_present(text: str, tokens: Sequence[str]) -> Optional[str]:
    """First token (list order) used as a literal value in `text`, or None."""
    if not text:
        return None
    for token in tokens:
        if not token:
            continue
        quoted, value = _token_patterns(token)
        if quoted.search(text) or value.search(text):
            return token
    return None

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

from pydantic import ValidationError

from template_doctor.compliance_engine.config import DEFAULT_MODEL_REFERENCE_GLOBS
from template_doctor.compliance_engine.errors import InputError
from template_doctor.compliance_engine.models import RepositorySnapshot

logger = logging.getLogger(__name__)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "env",
    ".tox",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".azure",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

# Paths whose text the compliance categories inspect (README, manifests, infra, workflows, config).
DEFAULT_CONTENT_GLOBS: List[str] = [
    "*.md",
    "*.bicep",
    "*.bicepparam",
    ".github/workflows/*",
    *DEFAULT_MODEL_REFERENCE_GLOBS,
]

DEFAULT_MAX_CONTENT_BYTES = 512 * 1024


@dataclass(frozen=True)
class LocalSnapshotSource:
    """Build a RepositorySnapshot from a checkout on disk."""

    root: Path
    content_globs: Sequence[str] = field(default_factory=lambda: list(DEFAULT_CONTENT_GLOBS))
    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES

    def load(self) -> RepositorySnapshot:
        root = Path(self.root).resolve()
        if not root.is_dir():
            raise InputError(f"Repository path is not a directory: {root}", {"path": str(root)})

        files: List[str] = []
        contents: Dict[str, str] = {}
        for rel_path, abs_path in self._iter_files(root):
            files.append(rel_path)
            if not any(fnmatchcase(rel_path, g) for g in self.content_globs):
                continue
            text = self._read_text(abs_path)
            if text is not None:
                contents[rel_path] = text

        logger.debug("Loaded %d files (%d with content) from %s", len(files), len(contents), root)
        return RepositorySnapshot(files=files, contents=contents)

    def _iter_files(self, root: Path) -> Iterator[tuple[str, Path]]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                yield rel_path, current_dir / filename

    def _read_text(self, path: Path) -> str | None:
        try:
            if path.stat().st_size > self.max_content_bytes:
                logger.debug("Skipping content of %s: larger than %d bytes", path, self.max_content_bytes)
                return None
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping content of %s: not UTF-8 text", path)
            return None
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None


def load_snapshot_file(path: Path) -> RepositorySnapshot:
    """Read a JSON snapshot: either the snapshot object itself or `{"snapshot": {...}}`."""
    try:
        with Path(path).open(encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise InputError(f"Could not read snapshot file {path}: {exc}", {"path": str(path)}) from exc

    if isinstance(payload, dict) and isinstance(payload.get("snapshot"), dict):
        payload = payload["snapshot"]
    if not isinstance(payload, dict):
        raise InputError(f"Snapshot file {path} must contain a JSON object", {"path": str(path)})
    try:
        return RepositorySnapshot.model_validate(payload)
    except ValidationError as exc:
        raise InputError(
            f"Snapshot file {path} is malformed",
            {"path": str(path), "errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        ) from exc

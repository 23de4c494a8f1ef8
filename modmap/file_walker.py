"""File walking utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


DEFAULT_PATTERNS = ("**/*.js",)
DEFAULT_EXCLUDES = {"node_modules", ".git", ".hg", ".svn"}


def iter_script_files(
    root: str | Path,
    patterns: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
) -> list[str]:
    root_path = Path(root)
    exclude_set = set(DEFAULT_EXCLUDES if excludes is None else excludes)
    seen: set[Path] = set()

    for pattern in patterns or DEFAULT_PATTERNS:
        for path in root_path.glob(pattern):
            if path in seen or not path.is_file():
                continue
            relative_parts = path.relative_to(root_path).parts
            if any(part in exclude_set for part in relative_parts):
                continue
            seen.add(path)

    return sorted(str(path) for path in seen)

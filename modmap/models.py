"""Lightweight data models for extracted module linkage."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


DEFAULT_BINDING = "default"
NAMESPACE_BINDING = "*"

SKIP_UNREADABLE = "unreadable"
SKIP_UNPARSABLE = "unparsable"


@dataclass(frozen=True)
class ImportRecord:
    names: tuple[str, ...]
    module: str  # specifier as written, quotes stripped
    path: str | None  # normalized path, relative specifiers only


@dataclass(frozen=True)
class FileAnalysis:
    imports: tuple[ImportRecord, ...] = ()
    exports: tuple[str, ...] = ()


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str
    detail: str = ""


@dataclass(frozen=True)
class ProjectMap:
    root: str
    files: Mapping[str, FileAnalysis] = field(default_factory=dict)
    skipped: tuple[SkippedFile, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.files, MappingProxyType):
            object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files

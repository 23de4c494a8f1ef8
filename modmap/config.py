"""Scan settings shared by the pipeline and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .file_walker import DEFAULT_EXCLUDES, DEFAULT_PATTERNS


class ConfigError(ValueError):
    """Raised when scan settings are inconsistent."""


@dataclass(frozen=True)
class ScanConfig:
    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    excludes: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_EXCLUDES))
    jobs: int = 1

    def __post_init__(self) -> None:
        if not self.patterns:
            raise ConfigError("At least one glob pattern is required.")
        if self.jobs < 1:
            raise ConfigError(f"jobs must be >= 1, got {self.jobs}")


def resolve_jobs(value: int | None) -> int:
    """Map a requested worker count onto a usable one (0 means every CPU)."""
    if value is None:
        return 1
    if value < 0:
        raise ConfigError(f"jobs must be >= 0, got {value}")
    if value == 0:
        return os.cpu_count() or 1
    return value

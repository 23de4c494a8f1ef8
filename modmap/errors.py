"""Per-file failures raised by the analysis pipeline."""

from __future__ import annotations

from .models import SKIP_UNPARSABLE, SKIP_UNREADABLE


class AnalysisError(RuntimeError):
    reason = "failed"

    def __init__(self, path: str, detail: str = "") -> None:
        message = f"{self.reason} file {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path
        self.detail = detail


class UnreadableFileError(AnalysisError):
    reason = SKIP_UNREADABLE


class UnparsableFileError(AnalysisError):
    reason = SKIP_UNPARSABLE

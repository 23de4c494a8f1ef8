"""Tree-sitter language loader helpers."""

from __future__ import annotations

from pathlib import PurePath

DIALECT_TSX = "tsx"
DIALECT_TYPESCRIPT = "typescript"

TYPESCRIPT_SUFFIXES = {".ts", ".mts", ".cts"}

# Binding names exposed by tree_sitter_typescript, per dialect.
_BINDINGS = {
    DIALECT_TSX: ("language_tsx", "LANGUAGE_TSX"),
    DIALECT_TYPESCRIPT: ("language_typescript", "LANGUAGE_TYPESCRIPT"),
}


def dialect_for_path(path: str | PurePath) -> str:
    """Pick the grammar for a file: plain TypeScript for .ts files, TSX otherwise."""
    if PurePath(path).suffix.lower() in TYPESCRIPT_SUFFIXES:
        return DIALECT_TYPESCRIPT
    return DIALECT_TSX


def load_language(dialect: str = DIALECT_TSX):
    """Return a Tree-sitter Language object for the requested dialect."""
    from tree_sitter import Language

    if dialect not in _BINDINGS:
        raise ValueError(f"Unknown dialect: {dialect}")

    try:
        import tree_sitter_typescript as tstypescript
    except Exception as exc:  # pragma: no cover - import guard
        raise RuntimeError("tree_sitter_typescript is not installed") from exc

    # tree_sitter_typescript exposes either a callable (`language_tsx`) or a constant.
    func_name, const_name = _BINDINGS[dialect]
    if hasattr(tstypescript, func_name):
        lang = getattr(tstypescript, func_name)
        lang = lang() if callable(lang) else lang
    elif hasattr(tstypescript, const_name):
        lang = getattr(tstypescript, const_name)
    else:
        raise RuntimeError("Unsupported tree_sitter_typescript API")

    # The binding may return a PyCapsule; wrap to Language if needed.
    if isinstance(lang, Language):
        return lang
    return Language(lang)

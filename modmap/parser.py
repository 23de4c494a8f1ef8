"""Tree-sitter based parser for JavaScript and TypeScript sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Parser

from .errors import UnparsableFileError, UnreadableFileError
from .ts_lang import DIALECT_TSX, dialect_for_path, load_language


@dataclass
class ParsedSource:
    tree: object
    source_bytes: bytes


class ScriptParser:
    """Parses script sources, keeping one Tree-sitter parser per dialect.

    Instances are not meant to be shared between threads; give each worker
    its own.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, Parser] = {}

    def _get_parser(self, dialect: str) -> Parser:
        parser = self._parsers.get(dialect)
        if parser is None:
            parser = Parser()
            language = load_language(dialect)
            # tree-sitter API supports either set_language or direct attribute.
            if hasattr(parser, "set_language"):
                parser.set_language(language)
            else:  # pragma: no cover - depends on binding version
                parser.language = language
            self._parsers[dialect] = parser
        return parser

    def parse_bytes(self, source_bytes: bytes, dialect: str = DIALECT_TSX) -> ParsedSource | None:
        tree = self._get_parser(dialect).parse(source_bytes)
        if tree is None:
            return None
        return ParsedSource(tree=tree, source_bytes=source_bytes)

    def parse_text(self, source_text: str, dialect: str = DIALECT_TSX) -> ParsedSource | None:
        return self.parse_bytes(source_text.encode("utf-8"), dialect)

    def parse_file(self, path: str | Path) -> ParsedSource:
        try:
            with open(path, "rb") as handle:
                source_bytes = handle.read()
            source_bytes.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise UnreadableFileError(str(path), str(exc)) from exc

        parsed = self.parse_bytes(source_bytes, dialect_for_path(path))
        if parsed is None:
            raise UnparsableFileError(str(path), "no syntax tree produced")
        return parsed

"""Extract module-level imports and exports from a JS/TS Tree-sitter AST."""

from __future__ import annotations

import os
from enum import Enum
from typing import Callable, Iterator

from .logging import get_logger
from .models import DEFAULT_BINDING, NAMESPACE_BINDING, FileAnalysis, ImportRecord


logger = get_logger("extract")

QUOTE_CHARS = "\"'`"

# Named declarations whose `name` field is the exported identifier.
NAMED_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "enum_declaration",
    "internal_module",
    "module",
}
VARIABLE_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}
# `export default ...` and TypeScript's `export = ...`
DEFAULT_EXPORT_MARKERS = {"default", "="}


class StatementKind(Enum):
    IMPORT = "import_statement"
    EXPORT = "export_statement"
    OTHER = "other"


_STATEMENT_KINDS = {
    StatementKind.IMPORT.value: StatementKind.IMPORT,
    StatementKind.EXPORT.value: StatementKind.EXPORT,
}


def classify_statement(node) -> StatementKind:
    return _STATEMENT_KINDS.get(node.type, StatementKind.OTHER)


def iter_statements(root) -> Iterator[tuple[StatementKind, object]]:
    """Yield top-level statements with their kind, in source order."""
    for child in root.children:
        yield classify_statement(child), child


def extract_module_info(parsed, path: str | None = None) -> FileAnalysis:
    source_bytes = parsed.source_bytes
    imports: list[ImportRecord] = []
    exports: list[str] = []

    for kind, node in iter_statements(parsed.tree.root_node):
        if kind is StatementKind.IMPORT:
            record = extract_import(node, source_bytes, path)
            if record is not None:
                imports.append(record)
        elif kind is StatementKind.EXPORT:
            exports.extend(extract_export(node, source_bytes, path))

    return FileAnalysis(imports=tuple(imports), exports=tuple(exports))


def resolve_module_path(file_path: str | None, specifier: str) -> str | None:
    """Resolve a relative specifier against the importing file's directory.

    Purely lexical: the target does not need to exist. Package specifiers
    are not resolved.
    """
    if not specifier.startswith("."):
        return None
    base_dir = os.path.dirname(file_path) if file_path else ""
    return os.path.normpath(os.path.join(base_dir, specifier))


def node_text(node, source_bytes: bytes) -> str | None:
    start, end = node.start_byte, node.end_byte
    if start < 0 or start > end or end > len(source_bytes):
        logger.debug("Node %s has out-of-range bytes %d..%d", node.type, start, end)
        return None
    try:
        return source_bytes[start:end].decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Node %s at bytes %d..%d is not valid UTF-8", node.type, start, end)
        return None


def extract_import(node, source_bytes: bytes, path: str | None = None) -> ImportRecord | None:
    names: list[str] = []
    module: str | None = None

    for child in node.children:
        if child.type == "import_clause":
            names.extend(_import_clause_names(child, source_bytes))
        elif child.type == "string":
            module = _string_value(child, source_bytes)
        elif child.type == "import_require_clause":
            # import x = require("./x")
            names.append(DEFAULT_BINDING)
            module = _first_string_value(child, source_bytes)

    if module is None:
        logger.debug("Skipping import without module specifier at %s", _position(node, path))
        return None

    return ImportRecord(
        names=tuple(names),
        module=module,
        path=resolve_module_path(path, module),
    )


def extract_export(node, source_bytes: bytes, path: str | None = None) -> list[str]:
    children = node.children
    if any(child.type in DEFAULT_EXPORT_MARKERS for child in children):
        return [DEFAULT_BINDING]

    names: list[str] = []
    matched = False
    for child in children:
        handler = _EXPORT_HANDLERS.get(child.type)
        if handler is None:
            continue
        matched = True
        names.extend(handler(child, source_bytes))

    if not matched:
        logger.debug("Unrecognized export shape at %s", _position(node, path))
    return names


def _import_clause_names(clause, source_bytes: bytes) -> list[str]:
    names: list[str] = []
    for child in clause.children:
        if child.type == "identifier":
            names.append(DEFAULT_BINDING)
        elif child.type == "namespace_import":
            names.append(NAMESPACE_BINDING)
        elif child.type == "named_imports":
            for specifier in child.children:
                if specifier.type != "import_specifier":
                    continue
                name = _export_name(specifier.child_by_field_name("name"), source_bytes)
                if name is not None:
                    names.append(name)
    return names


def _export_clause_names(clause, source_bytes: bytes) -> list[str]:
    names: list[str] = []
    for specifier in clause.children:
        if specifier.type != "export_specifier":
            continue
        target = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
        if target is None and specifier.child_count:
            target = specifier.child(0)
        name = _export_name(target, source_bytes)
        if name is not None:
            names.append(name)
    return names


def _named_declaration_names(declaration, source_bytes: bytes) -> list[str]:
    name_node = declaration.child_by_field_name("name")
    if name_node is None:
        return []
    name = _export_name(name_node, source_bytes)
    return [name] if name is not None else []


def _variable_declaration_names(declaration, source_bytes: bytes) -> list[str]:
    names: list[str] = []
    for declarator in declaration.children:
        if declarator.type != "variable_declarator":
            continue
        name_node = declarator.child_by_field_name("name")
        if name_node is not None:
            names.extend(_pattern_names(name_node, source_bytes))
    return names


def _type_alias_names(declaration, source_bytes: bytes) -> list[str]:
    name_node = declaration.child_by_field_name("name")
    if name_node is None or name_node.type != "type_identifier":
        return []
    name = node_text(name_node, source_bytes)
    return [name] if name is not None else []


def _namespace_export_names(node, source_bytes: bytes) -> list[str]:
    # export * as ns from "./x"
    named = [child for child in node.children if child.is_named]
    if not named:
        return []
    name = _export_name(named[-1], source_bytes)
    return [name] if name is not None else []


def _ambient_declaration_names(node, source_bytes: bytes) -> list[str]:
    # export declare const x: number
    names: list[str] = []
    for child in node.children:
        handler = _EXPORT_HANDLERS.get(child.type)
        if handler is not None:
            names.extend(handler(child, source_bytes))
    return names


def _pattern_names(node, source_bytes: bytes) -> list[str]:
    """Collect the identifiers bound by a declarator name or destructuring pattern."""
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
        name = node_text(node, source_bytes)
        return [name] if name is not None else []
    if node.type in ("assignment_pattern", "object_assignment_pattern"):
        left = node.child_by_field_name("left")
        return _pattern_names(left, source_bytes) if left is not None else []
    if node.type == "pair_pattern":
        value = node.child_by_field_name("value")
        return _pattern_names(value, source_bytes) if value is not None else []

    names: list[str] = []
    if node.type in ("object_pattern", "array_pattern", "rest_pattern"):
        for child in node.named_children:
            names.extend(_pattern_names(child, source_bytes))
    return names


def _export_name(node, source_bytes: bytes) -> str | None:
    if node is None:
        return None
    if node.type == "string":
        return _string_value(node, source_bytes)
    return node_text(node, source_bytes)


def _string_value(node, source_bytes: bytes) -> str | None:
    text = node_text(node, source_bytes)
    if text is None:
        return None
    if len(text) >= 2 and text[0] in QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text.strip(QUOTE_CHARS)


def _first_string_value(node, source_bytes: bytes) -> str | None:
    for child in node.children:
        if child.type == "string":
            return _string_value(child, source_bytes)
        found = _first_string_value(child, source_bytes)
        if found is not None:
            return found
    return None


def _position(node, path: str | None) -> str:
    line, column = node.start_point
    return f"{path or '<source>'}:{line + 1}:{column + 1}"


_EXPORT_HANDLERS: dict[str, Callable[[object, bytes], list[str]]] = {
    "export_clause": _export_clause_names,
    "type_alias_declaration": _type_alias_names,
    "namespace_export": _namespace_export_names,
    "ambient_declaration": _ambient_declaration_names,
}
_EXPORT_HANDLERS.update({kind: _named_declaration_names for kind in NAMED_DECLARATION_TYPES})
_EXPORT_HANDLERS.update({kind: _variable_declaration_names for kind in VARIABLE_DECLARATION_TYPES})

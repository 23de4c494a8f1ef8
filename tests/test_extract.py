from __future__ import annotations

import os

from modmap.extract import (
    StatementKind,
    extract_module_info,
    iter_statements,
    node_text,
    resolve_module_path,
)
from modmap.parser import ScriptParser


SAMPLE = """
import { a, b } from "./x";
import y from './y';
import "./z";
import { c } from "lib";

const local = 1;

export { a, b };
export function f() {}
export const x = 1;
export default 42;
export type T = {};
"""

# Mirrors a typical module with unused exports mixed in.
EXPORTER = """
const usedString = "John";
const unUsedString = "John";

const usedArrowFn = () => username;
const usedBool = true;

const usedNamedString = "John";
const unUsedNamedString = "John";

export { usedNamedString, unUsedNamedString };
export const usedDirectExportString = "John";
export const unUsedDirectExportString = "John";

export function usedFn() {}
export function unUsedFn() {}

const exporter = {
  usedArrowFn,
  usedBool,
  usedString,
};

export default exporter;
"""


def _analyze(source: str, path: str = "/p/f.js"):
    parser = ScriptParser()
    parsed = parser.parse_text(source)
    return extract_module_info(parsed, path=path)


def test_extracts_imports_in_source_order():
    analysis = _analyze(SAMPLE)
    imports = analysis.imports

    assert [record.names for record in imports] == [
        ("a", "b"),
        ("default",),
        (),
        ("c",),
    ]
    assert imports[0].module == "./x"
    assert imports[0].path == os.path.normpath("/p/x")
    assert imports[1].path == os.path.normpath("/p/y")
    assert imports[2].path == os.path.normpath("/p/z")


def test_package_specifier_is_not_resolved():
    analysis = _analyze('import {a} from "lib";')
    (record,) = analysis.imports

    assert record.names == ("a",)
    assert record.module == "lib"
    assert record.path is None


def test_extracts_exports_in_source_order():
    analysis = _analyze(SAMPLE)

    assert analysis.exports == ("a", "b", "f", "x", "default", "T")


def test_each_export_form():
    assert _analyze("export { a, b };").exports == ("a", "b")
    assert _analyze("export function f(){}").exports == ("f",)
    assert _analyze("export const x = 1").exports == ("x",)
    assert _analyze("export default 42").exports == ("default",)
    assert _analyze("export type T = {}").exports == ("T",)


def test_exporter_module():
    analysis = _analyze(EXPORTER, path="/repo/testcode/exporter.js")

    assert analysis.imports == ()
    assert analysis.exports == (
        "usedNamedString",
        "unUsedNamedString",
        "usedDirectExportString",
        "unUsedDirectExportString",
        "usedFn",
        "unUsedFn",
        "default",
    )


def test_supplemental_import_shapes():
    source = """
import d, { a } from "./mixed";
import * as ns from "./ns";
import { orig as alias } from "./aliased";
import type { Shape } from "./types";
"""
    analysis = _analyze(source)

    assert [record.names for record in analysis.imports] == [
        ("default", "a"),
        ("*",),
        ("orig",),
        ("Shape",),
    ]


def test_supplemental_export_shapes():
    source = """
export { a as b };
export let one = 1, two = 2;
export const { p, q: r } = obj;
export var legacy = true;
export class Widget {}
export interface Props { id: number }
export enum Color { Red }
export default function main() {}
export * as helpers from "./helpers";
export * from "./everything";
"""
    analysis = _analyze(source)

    assert analysis.exports == (
        "b",
        "one",
        "two",
        "p",
        "r",
        "legacy",
        "Widget",
        "Props",
        "Color",
        "default",
        "helpers",
    )


def test_nested_statements_are_ignored():
    source = """
function inner() {
  const x = 1;
  return x;
}
if (true) {
  console.log("no exports here");
}
"""
    analysis = _analyze(source)

    assert analysis.imports == ()
    assert analysis.exports == ()


def test_invalid_statement_does_not_block_valid_ones():
    source = """
import { a } from "./a";
)))
export function ok() {}
"""
    analysis = _analyze(source)

    assert any(record.names == ("a",) for record in analysis.imports)
    assert "ok" in analysis.exports


def test_extraction_is_idempotent():
    assert _analyze(SAMPLE) == _analyze(SAMPLE)


def test_statement_classification():
    parser = ScriptParser()
    parsed = parser.parse_text('import "./a";\nconst x = 1;\nexport { x };\n')
    kinds = [kind for kind, _ in iter_statements(parsed.tree.root_node)]

    assert kinds == [StatementKind.IMPORT, StatementKind.OTHER, StatementKind.EXPORT]


def test_resolve_module_path_is_lexical():
    resolved = resolve_module_path("/p/q/f.js", "./a/../b")

    assert resolved == os.path.normpath("/p/q/b")
    assert resolve_module_path("/p/q/f.js", "../up") == os.path.normpath("/p/up")
    assert resolve_module_path("/p/q/f.js", "react") is None


class _Node:
    type = "identifier"

    def __init__(self, start_byte: int, end_byte: int) -> None:
        self.start_byte = start_byte
        self.end_byte = end_byte


def test_node_text_rejects_invalid_slices():
    source_bytes = "é = 1".encode("utf-8")

    assert node_text(_Node(0, 2), source_bytes) == "é"
    assert node_text(_Node(0, 1), source_bytes) is None
    assert node_text(_Node(0, 99), source_bytes) is None

"""NetworkX import graph built from a project map."""

from __future__ import annotations

import os
from typing import Collection

import networkx as nx

from .models import ImportRecord, ProjectMap


NODE_FILE = "File"
NODE_MODULE = "Module"

EDGE_IMPORTS = "IMPORTS"

SCRIPT_SUFFIXES = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")


def file_node_id(path: str) -> str:
    return f"file:{path}"


def module_node_id(name: str) -> str:
    return f"module:{name}"


def candidate_paths(path: str) -> list[str]:
    """Paths a relative import may refer to, most specific first."""
    candidates = [path]
    candidates.extend(path + suffix for suffix in SCRIPT_SUFFIXES)
    candidates.extend(os.path.join(path, "index" + suffix) for suffix in SCRIPT_SUFFIXES)
    return candidates


def match_file(path: str, known: Collection[str]) -> str | None:
    for candidate in candidate_paths(path):
        if candidate in known:
            return candidate
    return None


def build_import_graph(project_map: ProjectMap) -> nx.DiGraph:
    graph = nx.DiGraph()
    graph.graph["root"] = project_map.root
    known = {os.path.normpath(path): path for path in project_map.files}

    for path, analysis in project_map.files.items():
        _ensure_node(
            graph,
            file_node_id(path),
            type=NODE_FILE,
            name=os.path.basename(path),
            path=path,
            exports=list(analysis.exports),
        )

    for path, analysis in project_map.files.items():
        source_id = file_node_id(path)
        for record in analysis.imports:
            target_id = _import_target(graph, record, known)
            _add_import_edge(graph, source_id, target_id, record)

    return graph


def _import_target(graph: nx.DiGraph, record: ImportRecord, known: dict[str, str]) -> str:
    if record.path is None:
        target_id = module_node_id(record.module)
        _ensure_node(
            graph,
            target_id,
            type=NODE_MODULE,
            name=record.module,
            path=None,
            external=True,
        )
        return target_id

    matched = match_file(record.path, known.keys())
    if matched is not None:
        return file_node_id(known[matched])

    target_id = file_node_id(record.path)
    _ensure_node(
        graph,
        target_id,
        type=NODE_FILE,
        name=os.path.basename(record.path),
        path=record.path,
        missing=True,
    )
    return target_id


def _add_import_edge(
    graph: nx.DiGraph, source_id: str, target_id: str, record: ImportRecord
) -> None:
    if graph.has_edge(source_id, target_id):
        names = graph[source_id][target_id]["names"]
        names.extend(name for name in record.names if name not in names)
        return
    graph.add_edge(source_id, target_id, type=EDGE_IMPORTS, names=list(record.names))


def _ensure_node(graph: nx.DiGraph, node_id: str, **attrs) -> None:
    if node_id not in graph:
        graph.add_node(node_id, **attrs)

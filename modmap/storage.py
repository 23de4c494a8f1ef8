"""JSON serialization helpers for project maps and import graphs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import networkx as nx
from networkx.readwrite import json_graph

from .models import FileAnalysis, ImportRecord, ProjectMap, SkippedFile


def project_map_to_dict(project_map: ProjectMap) -> dict[str, Any]:
    return {
        "root": project_map.root,
        "files": {
            path: {
                "imports": [
                    {"names": list(record.names), "module": record.module, "path": record.path}
                    for record in analysis.imports
                ],
                "exports": list(analysis.exports),
            }
            for path, analysis in project_map.files.items()
        },
        "skipped": [
            {"path": item.path, "reason": item.reason, "detail": item.detail}
            for item in project_map.skipped
        ],
    }


def project_map_from_dict(data: dict[str, Any]) -> ProjectMap:
    files = {}
    for path, entry in data.get("files", {}).items():
        imports = tuple(
            ImportRecord(
                names=tuple(item.get("names", [])),
                module=item["module"],
                path=item.get("path"),
            )
            for item in entry.get("imports", [])
        )
        files[path] = FileAnalysis(imports=imports, exports=tuple(entry.get("exports", [])))

    skipped = tuple(
        SkippedFile(path=item["path"], reason=item["reason"], detail=item.get("detail", ""))
        for item in data.get("skipped", [])
    )
    return ProjectMap(root=data.get("root", ""), files=files, skipped=skipped)


def save_project_map(project_map: ProjectMap, path: str | Path) -> None:
    data = project_map_to_dict(project_map)
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_project_map(path: str | Path) -> ProjectMap:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return project_map_from_dict(data)


def save_graph(graph: nx.DiGraph, path: str | Path) -> None:
    data = json_graph.node_link_data(graph)
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_graph(path: str | Path) -> nx.DiGraph:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return json_graph.node_link_graph(data, directed=True)

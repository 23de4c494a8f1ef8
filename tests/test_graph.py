from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

from modmap.graph import (
    EDGE_IMPORTS,
    NODE_MODULE,
    build_import_graph,
    file_node_id,
    match_file,
    module_node_id,
)
from modmap.models import FileAnalysis, ImportRecord, ProjectMap, SkippedFile
from modmap.storage import (
    load_graph,
    load_project_map,
    project_map_to_dict,
    save_graph,
    save_project_map,
)


def _project_map() -> ProjectMap:
    return ProjectMap(
        root="/p",
        files={
            "/p/app.js": FileAnalysis(
                imports=(
                    ImportRecord(names=("greet",), module="./greet", path="/p/greet"),
                    ImportRecord(names=("default",), module="./widgets", path="/p/widgets"),
                    ImportRecord(names=("useState",), module="react", path=None),
                    ImportRecord(names=(), module="./gone", path="/p/gone"),
                    ImportRecord(names=("wave",), module="./greet.js", path="/p/greet.js"),
                ),
                exports=("default",),
            ),
            "/p/greet.js": FileAnalysis(exports=("greet", "wave")),
            "/p/widgets/index.js": FileAnalysis(exports=("default",)),
        },
        skipped=(SkippedFile(path="/p/broken.js", reason="unreadable", detail="denied"),),
    )


def test_build_import_graph_nodes_and_edges():
    graph = build_import_graph(_project_map())
    app = file_node_id("/p/app.js")
    greet = file_node_id("/p/greet.js")

    assert graph.nodes[greet]["exports"] == ["greet", "wave"]
    assert graph.has_edge(app, greet)
    assert graph[app][greet]["type"] == EDGE_IMPORTS
    assert graph[app][greet]["names"] == ["greet", "wave"]

    assert graph.has_edge(app, file_node_id("/p/widgets/index.js"))

    react = module_node_id("react")
    assert graph.nodes[react]["type"] == NODE_MODULE
    assert graph.nodes[react]["external"] is True

    gone = file_node_id("/p/gone")
    assert graph.nodes[gone]["missing"] is True
    assert file_node_id("/p/broken.js") not in graph


def test_match_file_prefers_exact_then_suffix_then_index():
    known = {"/p/a", "/p/a.js", "/p/b.ts", "/p/c/index.tsx"}

    assert match_file("/p/a", known) == "/p/a"
    assert match_file("/p/b", known) == "/p/b.ts"
    assert match_file("/p/c", known) == "/p/c/index.tsx"
    assert match_file("/p/d", known) is None


def test_project_map_json_roundtrip():
    project_map = _project_map()
    with TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "map.json"
        save_project_map(project_map, path)
        loaded = load_project_map(path)

    assert loaded.root == "/p"
    assert dict(loaded.files) == dict(project_map.files)
    assert loaded.skipped == project_map.skipped
    assert list(project_map_to_dict(loaded)["files"]) == list(project_map.files)


def test_graph_serialization_roundtrip():
    graph = build_import_graph(_project_map())
    with TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "graph.json"
        save_graph(graph, path)
        loaded = load_graph(path)

    assert loaded.number_of_nodes() == graph.number_of_nodes()
    assert loaded.number_of_edges() == graph.number_of_edges()

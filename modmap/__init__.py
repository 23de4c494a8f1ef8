"""Module linkage extraction for JavaScript and TypeScript projects."""

from .parser import ScriptParser
from .extract import extract_module_info
from .file_walker import iter_script_files
from .graph import build_import_graph
from .pipeline import build_project_map
from .storage import load_project_map, save_project_map

__all__ = [
    "ScriptParser",
    "extract_module_info",
    "iter_script_files",
    "build_import_graph",
    "build_project_map",
    "load_project_map",
    "save_project_map",
]

"""End-to-end pipeline for building an import/export map from a project tree."""

from __future__ import annotations

import argparse
import json
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable

from .config import ConfigError, ScanConfig, resolve_jobs
from .errors import AnalysisError
from .extract import extract_module_info
from .file_walker import DEFAULT_EXCLUDES, DEFAULT_PATTERNS, iter_script_files
from .graph import build_import_graph
from .logging import configure_logging, get_logger
from .models import FileAnalysis, ProjectMap, SkippedFile
from .parser import ScriptParser
from .storage import project_map_to_dict, save_graph, save_project_map


logger = get_logger("pipeline")


class ProjectAggregator:
    """Collects per-file results into a ProjectMap.

    The aggregator is open until ``finalize`` is called; afterwards any
    attempt to add results raises ``RuntimeError``. Writes are serialized so
    workers may report concurrently.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = str(root)
        self._files: dict[str, FileAnalysis] = {}
        self._skipped: list[SkippedFile] = []
        self._lock = threading.Lock()
        self._finalized = False

    def add(self, path: str, analysis: FileAnalysis) -> None:
        with self._lock:
            self._ensure_open()
            if path in self._files:
                raise ValueError(f"Duplicate path in project map: {path}")
            self._files[path] = analysis

    def skip(self, path: str, reason: str, detail: str = "") -> None:
        logger.warning("Skipping %s (%s): %s", path, reason, detail)
        with self._lock:
            self._ensure_open()
            self._skipped.append(SkippedFile(path=path, reason=reason, detail=detail))

    def finalize(self) -> ProjectMap:
        with self._lock:
            self._ensure_open()
            self._finalized = True
            return ProjectMap(
                root=self.root,
                files=dict(self._files),
                skipped=tuple(sorted(self._skipped, key=lambda item: item.path)),
            )

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _ensure_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Project map has already been finalized")


def analyze_file(parser: ScriptParser, path: str) -> FileAnalysis:
    parsed = parser.parse_file(path)
    return extract_module_info(parsed, path=path)


def build_project_map(
    root: str | Path,
    config: ScanConfig | None = None,
    parser_factory: Callable[[], ScriptParser] = ScriptParser,
) -> ProjectMap:
    config = config or ScanConfig()
    files = iter_script_files(root, config.patterns, config.excludes)
    logger.info("Analyzing %d files under %s", len(files), root)

    aggregator = ProjectAggregator(root)
    if config.jobs == 1 or len(files) <= 1:
        parser = parser_factory()
        for path in files:
            _process(aggregator, parser, path)
    else:
        local = threading.local()

        def worker(path: str) -> None:
            parser = getattr(local, "parser", None)
            if parser is None:
                parser = local.parser = parser_factory()
            _process(aggregator, parser, path)

        with ThreadPoolExecutor(max_workers=config.jobs) as executor:
            futures = [executor.submit(worker, path) for path in files]
            for future in as_completed(futures):
                future.result()

    project_map = aggregator.finalize()
    logger.info(
        "Analyzed %d files, skipped %d", len(project_map.files), len(project_map.skipped)
    )
    return project_map


def _process(aggregator: ProjectAggregator, parser: ScriptParser, path: str) -> None:
    try:
        analysis = analyze_file(parser, path)
    except AnalysisError as exc:
        aggregator.skip(path, exc.reason, exc.detail)
        return
    logger.debug(
        "%s: %d imports, %d exports", path, len(analysis.imports), len(analysis.exports)
    )
    aggregator.add(path, analysis)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modmap",
        description="Map module-level imports and exports for every script in a project",
    )
    parser.add_argument("root", help="Root directory of the project")
    parser.add_argument("--output", help="Write the project map JSON here instead of stdout")
    parser.add_argument("--graph", help="Also write the import graph as node-link JSON")
    parser.add_argument(
        "--pattern",
        action="append",
        dest="patterns",
        help=f"Glob pattern beneath the root (repeatable, default: {DEFAULT_PATTERNS[0]})",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        dest="excludes",
        default=[],
        help="Directory or file name to skip, in addition to the defaults (repeatable)",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Worker threads (0 uses every CPU)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)

    root = Path(args.root)
    if not root.is_dir():
        parser.error(f"root directory not found: {root}")

    try:
        config = ScanConfig(
            patterns=tuple(args.patterns or DEFAULT_PATTERNS),
            excludes=frozenset(DEFAULT_EXCLUDES | set(args.excludes)),
            jobs=resolve_jobs(args.jobs),
        )
    except ConfigError as exc:
        parser.error(str(exc))

    project_map = build_project_map(root, config)

    if args.output:
        save_project_map(project_map, args.output)
        logger.info("Wrote %s", args.output)
    else:
        json.dump(project_map_to_dict(project_map), sys.stdout, indent=2)
        sys.stdout.write("\n")

    if args.graph:
        graph = build_import_graph(project_map)
        save_graph(graph, args.graph)
        logger.info(
            "Wrote %s with %d nodes and %d edges",
            args.graph,
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

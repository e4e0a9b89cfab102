"""Import graph construction from already-read source text."""

from __future__ import annotations

from typing import Iterable, Mapping

from ..logging_config import get_logger
from ..models import FileEdge
from .imports import extract_imports, resolve_import
from .models import ImportGraph

logger = get_logger(__name__)


def build_import_graph(files: Iterable[str], sources: Mapping[str, str]) -> ImportGraph:
    """Build the import graph for one scan.

    Args:
        files: Every scanned file (absolute, canonical paths)
        sources: Source text per file; files missing here contribute no
            outgoing edges but can still be import targets

    Returns:
        ImportGraph with edges deduplicated by (source, target). Self-imports
        and imports that do not resolve to a scanned file are dropped.
    """
    file_list = list(files)
    file_set = frozenset(file_list)

    graph = ImportGraph(
        fan_in={f: 0 for f in file_list},
        fan_out={f: 0 for f in file_list},
    )
    seen: set[tuple[str, str]] = set()
    unresolved = 0

    for source_file in file_list:
        text = sources.get(source_file)
        if text is None:
            continue
        for ref in extract_imports(source_file, text):
            targets = resolve_import(source_file, ref, file_set)
            if not targets:
                unresolved += 1
                continue
            for target in targets:
                key = (source_file, target)
                if target == source_file or key in seen:
                    continue
                seen.add(key)
                graph.edges.append(FileEdge(source_file, target))
                graph.fan_out[source_file] += 1
                graph.fan_in[target] += 1

    logger.debug(
        "Import graph: %d files, %d edges, %d unresolved relative imports",
        len(file_list),
        graph.edge_count,
        unresolved,
    )
    return graph

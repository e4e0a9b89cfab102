"""Static import graph: relative import extraction, resolution, fan-in/out."""

from .builder import build_import_graph
from .imports import ImportRef, extract_imports, resolve_import
from .models import ImportGraph

__all__ = [
    "ImportGraph",
    "ImportRef",
    "build_import_graph",
    "extract_imports",
    "resolve_import",
]

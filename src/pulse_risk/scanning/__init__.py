"""Source scanning: language detection, tree walk and metric extraction."""

from .extractor import MetricExtractor, read_source
from .fallback import HeuristicAnalyzer
from .languages import (
    SUPPORTED_EXTENSIONS,
    detect_language,
    is_ignored_file,
    is_source_file,
)
from .structural import StructuralAnalyzer
from .walker import walk_project

__all__ = [
    "MetricExtractor",
    "HeuristicAnalyzer",
    "StructuralAnalyzer",
    "SUPPORTED_EXTENSIONS",
    "detect_language",
    "is_ignored_file",
    "is_source_file",
    "read_source",
    "walk_project",
]

"""MetricExtractor: turns one file's source text into FileMetrics.

Strategy selection:
    1. Language has a structural grammar: parse with tree-sitter
    2. Structural parse fails (syntax errors, parser exception): log a warning
       and use the regex heuristics for that file
    3. No structural grammar (Python, unknown): regex heuristics

The number of degraded files is tracked so a scan can report it.
"""

from __future__ import annotations

from pathlib import Path
from threading import Lock

from ..exceptions import FileAccessError, ParsingError
from ..logging_config import get_logger
from ..models import FileMetrics, Language
from .fallback import HeuristicAnalyzer
from .languages import detect_language, get_language_spec
from .structural import StructuralAnalyzer

logger = get_logger(__name__)


def read_source(path: str) -> str:
    """Read a source file as text.

    Raises:
        FileAccessError: If the file cannot be read
    """
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e


class MetricExtractor:
    """Extracts FileMetrics with structural parsing and regex fallback.

    Attributes:
        structural_count: Files measured from a syntax tree
        fallback_count: Structural-capable files that degraded to regex
        heuristic_count: Files measured by regex (including fallbacks)
    """

    def __init__(
        self,
        structural: StructuralAnalyzer | None = None,
        heuristic: HeuristicAnalyzer | None = None,
    ) -> None:
        self._structural = structural or StructuralAnalyzer()
        self._heuristic = heuristic or HeuristicAnalyzer()
        self._lock = Lock()
        self.structural_count = 0
        self.fallback_count = 0
        self.heuristic_count = 0

    def extract(self, path: str, source: str, language: Language | None = None) -> FileMetrics:
        """Measure already-read source text.

        Never raises for parse problems; the heuristic path always produces a
        result.
        """
        if language is None:
            language = detect_language(path)

        if get_language_spec(language).structural:
            try:
                metrics = self._structural.analyze(source, path, language)
            except ParsingError as e:
                logger.warning("Structural parse failed for %s (%s); using regex fallback", path, e.reason)
                with self._lock:
                    self.fallback_count += 1
            else:
                with self._lock:
                    self.structural_count += 1
                return metrics

        with self._lock:
            self.heuristic_count += 1
        return self._heuristic.analyze(source, path, language)

    def extract_file(self, path: str) -> FileMetrics:
        """Read and measure a file.

        Raises:
            FileAccessError: If the file cannot be read
        """
        return self.extract(path, read_source(path))

    def reset_stats(self) -> None:
        with self._lock:
            self.structural_count = 0
            self.fallback_count = 0
            self.heuristic_count = 0

"""Regex-based heuristic analyzer.

Primary strategy for languages without a structural parser (Python), and the
degraded path for JS/TS files the structural parser rejects.

The heuristics are deliberately line-oriented:
  - a function starts on any line matching a definition pattern and runs
    until the next definition line or end of file (nested definitions cut
    their parent short)
  - complexity is 1 + the number of branch patterns matching each line
  - parameters come from the first parenthesised list on the definition line
  - nesting depth is indentation / 4, tabs expanded to 4 columns

Results are approximate but deterministic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import ANONYMOUS, FileMetrics, FunctionMetrics, Language, ParseMode
from .languages import LanguageSpec, get_language_spec

_PARAMS_RE = re.compile(r"\(([^)]*)\)")
_INDENT_RE = re.compile(r"^[ \t]*")

TAB_WIDTH = 4
INDENT_WIDTH = 4


@dataclass
class HeuristicAnalyzer:
    """Line-by-line regex analyzer producing FileMetrics."""

    def analyze(self, source: str, path: str, language: Language) -> FileMetrics:
        """Analyze source text.

        Args:
            source: File content
            path: Absolute file path (recorded, never read)
            language: Detected language; selects the pattern set

        Returns:
            FileMetrics with parse_mode HEURISTIC
        """
        spec = get_language_spec(language)
        lines = source.splitlines()
        starts = [i for i, line in enumerate(lines) if self._definition_name(spec, line)]

        functions: list[FunctionMetrics] = []
        for n, start in enumerate(starts):
            end = starts[n + 1] if n + 1 < len(starts) else len(lines)
            functions.append(self._measure(spec, lines, start, end))

        return FileMetrics(
            file_path=path,
            total_lines=len(lines),
            functions=tuple(functions),
            language=language,
            parse_mode=ParseMode.HEURISTIC,
        )

    def _measure(
        self, spec: LanguageSpec, lines: list[str], start: int, end: int
    ) -> FunctionMetrics:
        header = lines[start]
        body = lines[start:end]

        complexity = 1 + sum(
            1 for line in body for pattern in spec.branch_patterns if pattern.search(line)
        )

        return FunctionMetrics(
            name=self._definition_name(spec, header) or ANONYMOUS,
            start_line=start + 1,
            line_count=len(body),
            cyclomatic_complexity=complexity,
            parameter_count=count_parameters(header),
            max_nesting_depth=max((indent_depth(line) for line in body), default=0),
        )

    @staticmethod
    def _definition_name(spec: LanguageSpec, line: str) -> str | None:
        for pattern in spec.definition_patterns:
            match = pattern.match(line)
            if match:
                return match.group(1)
        return None


def count_parameters(line: str) -> int:
    """Count non-empty comma-separated tokens in the first ``(...)`` on a line."""
    match = _PARAMS_RE.search(line)
    if not match:
        return 0
    return sum(1 for token in match.group(1).split(",") if token.strip())


def indent_depth(line: str) -> int:
    """Indentation level of a line; blank lines are level 0."""
    if not line.strip():
        return 0
    indent = _INDENT_RE.match(line).group(0)  # type: ignore[union-attr]
    width = len(indent.replace("\t", " " * TAB_WIDTH))
    return width // INDENT_WIDTH

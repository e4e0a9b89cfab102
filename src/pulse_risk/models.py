"""Data models for per-file risk analysis.

Levels:
  Functions: FunctionMetrics, produced by the metric extractor
  Files: FileMetrics (structure) and RiskScoreResult (scores)
  Relationships: FileEdge, produced by the import graph builder
  Scan: ScanResult, the unit handed to downstream consumers

Every value here is immutable. A re-scan produces new values that replace
the old ones wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Protocol

# Display name for functions with no resolvable identifier.
ANONYMOUS = "anonymous"


class Language(str, Enum):
    """Languages the extractor knows how to read."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    UNKNOWN = "unknown"


class ParseMode(str, Enum):
    """Which extraction strategy produced a FileMetrics."""

    STRUCTURAL = "structural"
    HEURISTIC = "heuristic"


# ── Functions and files ────────────────────────────────────────────


@dataclass(frozen=True)
class FunctionMetrics:
    """One detected function, method or arrow function."""

    name: str
    start_line: int  # 1-based
    line_count: int  # inclusive span
    cyclomatic_complexity: int = 1
    parameter_count: int = 0
    max_nesting_depth: int = 0

    @property
    def is_anonymous(self) -> bool:
        return self.name == ANONYMOUS


@dataclass(frozen=True)
class FileMetrics:
    """Structural metrics for one analyzed file."""

    file_path: str  # absolute, canonical
    total_lines: int
    functions: tuple[FunctionMetrics, ...] = ()
    language: Language = Language.UNKNOWN
    parse_mode: ParseMode = ParseMode.HEURISTIC

    @property
    def total_functions(self) -> int:
        return len(self.functions)

    @property
    def named_functions(self) -> tuple[FunctionMetrics, ...]:
        return tuple(fn for fn in self.functions if not fn.is_anonymous)


# ── Scores ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RiskScoreResult:
    """Aggregated risk for one file. Component scores are in [0, 100]."""

    file_path: str
    language: Language
    complexity_score: float
    function_size_score: float
    churn_score: float
    depth_score: float
    param_score: float
    global_score: float
    fan_in: int = 0
    fan_out: int = 0

    def with_fan(self, fan_in: int, fan_out: int) -> RiskScoreResult:
        """Return a copy with graph counts filled in."""
        return replace(self, fan_in=fan_in, fan_out=fan_out)

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "language": self.language.value,
            "globalScore": round(self.global_score, 2),
            "details": {
                "complexityScore": round(self.complexity_score, 2),
                "functionSizeScore": round(self.function_size_score, 2),
                "churnScore": round(self.churn_score, 2),
                "depthScore": round(self.depth_score, 2),
                "paramScore": round(self.param_score, 2),
                "fanIn": self.fan_in,
                "fanOut": self.fan_out,
            },
        }


# ── Relationships ──────────────────────────────────────────────────


@dataclass(frozen=True, order=True)
class FileEdge:
    """``source`` textually imports ``target``; both are scanned files."""

    source: str
    target: str


# ── Scan ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FileFailure:
    """A file that was excluded from a scan and why."""

    file_path: str
    reason: str


@dataclass(frozen=True)
class ScanResult:
    """Everything one scan pass produced.

    ``files`` is sorted by descending global score. ``metrics`` keeps the
    function-level detail behind each score for consumers that drill down.
    """

    project_root: str
    files: tuple[RiskScoreResult, ...] = ()
    edges: tuple[FileEdge, ...] = ()
    failures: tuple[FileFailure, ...] = ()
    metrics: Mapping[str, FileMetrics] = field(default_factory=dict)

    def get(self, file_path: str) -> RiskScoreResult | None:
        for result in self.files:
            if result.file_path == file_path:
                return result
        return None

    def to_dict(self) -> dict:
        return {
            "projectRoot": self.project_root,
            "files": [r.to_dict() for r in self.files],
            "edges": [{"from": e.source, "to": e.target} for e in self.edges],
            "failures": [{"filePath": f.file_path, "reason": f.reason} for f in self.failures],
        }


class ScanSink(Protocol):
    """Consumer of finished scans (persistence, presentation)."""

    def handle(self, result: ScanResult) -> None: ...

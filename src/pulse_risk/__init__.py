"""
Pulse Risk - per-file risk scores for evolving codebases

Scores every source file from its worst function (complexity, length,
nesting, parameters), its recent git churn, and its place in the import
graph. Scans once or keeps watching and re-scanning as files change.
"""

__version__ = "0.1.0"

from .analysis import Scanner, scan
from .models import (
    FileEdge,
    FileFailure,
    FileMetrics,
    FunctionMetrics,
    Language,
    RiskScoreResult,
    ScanResult,
)
from .watcher import ProjectWatcher, watch

__all__ = [
    "scan",  # One-shot scan
    "watch",  # Scan, then re-scan on changes
    "Scanner",
    "ProjectWatcher",
    "ScanResult",
    "RiskScoreResult",
    "FileMetrics",
    "FunctionMetrics",
    "FileEdge",
    "FileFailure",
    "Language",
]

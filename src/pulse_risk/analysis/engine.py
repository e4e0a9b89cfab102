"""Scan orchestrator implementing one full pass over a project.

Phases:
  Walk tree → Invalidate + build churn snapshot
            → Per-file: read once, extract metrics, aggregate (parallel)
            → Import graph over the collected sources (barrier)
            → Backfill fan-in/fan-out, sort, hand off to sinks

A scan always re-walks the whole tree; its ScanResult replaces the previous
one. Scans on one Scanner are serialized, so an overlapping trigger waits
for the scan in flight instead of racing it on the churn cache.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import PulseConfig
from ..exceptions import AnalysisError
from ..graph.builder import build_import_graph
from ..logging_config import get_logger
from ..models import FileFailure, FileMetrics, RiskScoreResult, ScanResult, ScanSink
from ..scanning.extractor import MetricExtractor, read_source
from ..scanning.walker import walk_project
from ..scoring.risk import DEFAULT_WEIGHTS, ScoreWeights, aggregate, churn_score
from ..temporal.churn import ChurnScorer
from ..temporal.git_extractor import GitHistoryProvider
from ..temporal.models import ChurnSnapshot, HistoryProvider

logger = get_logger(__name__)

# CPU count capped at 8; reads dominate and more threads only add contention.
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many files a thread pool costs more than it saves.
_PARALLEL_MIN_FILES = 10


@dataclass(frozen=True)
class _FileOutcome:
    """Per-file worker output: either the analysis or the failure."""

    path: str
    source: str = ""
    metrics: Optional[FileMetrics] = None
    result: Optional[RiskScoreResult] = None
    failure: Optional[FileFailure] = None


class Scanner:
    """Runs full scans of a project and publishes each ScanResult.

    Args:
        config: Loaded configuration; ``project_root`` is the default scan root
        history_provider: Version-history source. Defaults to git at the
            scanned root.
        extractor: Metric extractor (shared across scans)
        weights: Global score weights
        sinks: Consumers notified with every finished ScanResult
    """

    def __init__(
        self,
        config: PulseConfig,
        history_provider: Optional[HistoryProvider] = None,
        extractor: Optional[MetricExtractor] = None,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        sinks: Sequence[ScanSink] = (),
    ):
        self.config = config
        self.extractor = extractor or MetricExtractor()
        self.weights = weights
        self.sinks = list(sinks)
        self._explicit_provider = history_provider is not None
        self.churn = ChurnScorer(history_provider, window_days=config.churn_window_days)
        self._history_root: Optional[str] = None
        self._scan_lock = threading.Lock()
        self.last_result: Optional[ScanResult] = None

    @property
    def workers(self) -> int:
        return self.config.workers or _DEFAULT_WORKERS

    def scan(self, project_root: Optional[str] = None) -> ScanResult:
        """Run one full scan.

        Per-file problems are recorded in ``ScanResult.failures`` and never
        raise.

        Raises:
            InvalidPathError: If the project root is missing or unreadable
        """
        root = os.path.realpath(project_root or self.config.project_root)
        with self._scan_lock:
            result = self._scan(root)
            self.last_result = result
        self._publish(result)
        return result

    def _scan(self, root: str) -> ScanResult:
        files = walk_project(root, self.config.ignore)
        logger.info("Found %d files to scan under %s", len(files), root)

        # Churn must reflect the latest history, and must be complete before
        # any worker reads it.
        self._bind_history(root)
        self.churn.invalidate()
        snapshot = self.churn.snapshot()

        self.extractor.reset_stats()
        outcomes = self._analyze_all(files, snapshot)

        sources: dict[str, str] = {}
        metrics: dict[str, FileMetrics] = {}
        partial: list[RiskScoreResult] = []
        failures: list[FileFailure] = []
        for outcome in outcomes:
            if outcome.failure is not None or outcome.metrics is None or outcome.result is None:
                if outcome.failure is not None:
                    failures.append(outcome.failure)
                continue
            sources[outcome.path] = outcome.source
            metrics[outcome.path] = outcome.metrics
            partial.append(outcome.result)

        graph = build_import_graph(sorted(sources), sources)

        results = sorted(
            (r.with_fan(graph.fan_in[r.file_path], graph.fan_out[r.file_path]) for r in partial),
            key=lambda r: (-r.global_score, r.file_path),
        )

        logger.info(
            "Scan complete: %d files, %d connections, %d skipped, %d parsed by regex fallback",
            len(results),
            graph.edge_count,
            len(failures),
            self.extractor.fallback_count,
        )

        return ScanResult(
            project_root=root,
            files=tuple(results),
            edges=tuple(graph.edges),
            failures=tuple(sorted(failures, key=lambda f: f.file_path)),
            metrics=metrics,
        )

    def _bind_history(self, root: str) -> None:
        if self._explicit_provider or self._history_root == root:
            return
        self.churn.provider = GitHistoryProvider(root)
        self._history_root = root

    def _analyze_all(self, files: list[str], snapshot: ChurnSnapshot) -> list[_FileOutcome]:
        if len(files) < _PARALLEL_MIN_FILES or self.workers == 1:
            return [self._analyze_file(path, snapshot) for path in files]

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="pulse-scan") as pool:
            return list(pool.map(lambda path: self._analyze_file(path, snapshot), files))

    def _analyze_file(self, path: str, snapshot: ChurnSnapshot) -> _FileOutcome:
        try:
            source = read_source(path)
            metrics = self.extractor.extract(path, source)
            result = aggregate(metrics, churn_score(snapshot.touch_count(path)), self.weights)
        except AnalysisError as e:
            logger.warning("Skipping %s: %s", path, e)
            return _FileOutcome(path, failure=FileFailure(path, str(e)))
        except Exception as e:
            logger.warning("Skipping %s: unexpected %s: %s", path, type(e).__name__, e, exc_info=True)
            return _FileOutcome(path, failure=FileFailure(path, f"{type(e).__name__}: {e}"))
        return _FileOutcome(path, source=source, metrics=metrics, result=result)

    def _publish(self, result: ScanResult) -> None:
        for sink in self.sinks:
            try:
                sink.handle(result)
            except Exception:
                logger.exception("Scan result sink %r failed", sink)


def scan(
    project_root: str,
    config: Optional[PulseConfig] = None,
    history_provider: Optional[HistoryProvider] = None,
) -> ScanResult:
    """Scan ``project_root`` once with default settings (or ``config``)."""
    if config is None:
        config = PulseConfig(project_root=os.path.abspath(project_root))
    return Scanner(config, history_provider=history_provider).scan(project_root)

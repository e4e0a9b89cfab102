"""Churn scoring: commit-touch counts within a trailing window.

One history query covers the whole project; counts are tallied per absolute
path in a single pass and held in a ChurnSnapshot until ``invalidate()``.
A failed query yields an empty snapshot, so every file scores 0 churn.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Optional

from ..exceptions import HistoryError
from ..logging_config import get_logger
from ..scoring.risk import churn_score
from .models import EMPTY_SNAPSHOT, ChurnSnapshot, HistoryProvider

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 30


def build_snapshot(provider: HistoryProvider, window_days: int = DEFAULT_WINDOW_DAYS) -> ChurnSnapshot:
    """Query history once and tally touches per path.

    Never raises for history failures.
    """
    try:
        commits = provider.log_since(window_days)
    except HistoryError as e:
        logger.warning("Churn unavailable, scoring all files as 0: %s", e)
        return ChurnSnapshot(window_days=window_days)

    counts: Counter[str] = Counter()
    for commit in commits:
        counts.update(set(commit.files))

    logger.info("Churn cache built: %d files touched by %d commits", len(counts), len(commits))
    return ChurnSnapshot(counts=dict(counts), window_days=window_days, commits_seen=len(commits))


class ChurnScorer:
    """Lazily built, explicitly invalidated churn cache.

    The snapshot is built on the first query after ``invalidate()`` and is
    then read-only, so worker threads can share it.
    """

    def __init__(self, provider: Optional[HistoryProvider], window_days: int = DEFAULT_WINDOW_DAYS):
        self.provider = provider
        self.window_days = window_days
        self._snapshot: Optional[ChurnSnapshot] = None
        self._lock = threading.Lock()

    def invalidate(self) -> None:
        """Drop the cached snapshot; the next query rebuilds it."""
        with self._lock:
            self._snapshot = None

    def snapshot(self) -> ChurnSnapshot:
        with self._lock:
            if self._snapshot is None:
                if self.provider is None:
                    self._snapshot = EMPTY_SNAPSHOT
                else:
                    self._snapshot = build_snapshot(self.provider, self.window_days)
            return self._snapshot

    def touch_count(self, file_path: str) -> int:
        return self.snapshot().touch_count(file_path)

    def score(self, file_path: str) -> float:
        """Normalized churn score in [0, 100]."""
        return churn_score(self.touch_count(file_path))

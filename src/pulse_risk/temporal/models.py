"""Data models for version-history (churn) analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Protocol


@dataclass(frozen=True)
class Commit:
    hash: str
    files: tuple[str, ...]  # absolute paths touched by the commit


@dataclass(frozen=True)
class ChurnSnapshot:
    """Commit-touch counts per absolute path within one trailing window.

    Built in one pass and never updated afterwards; a new scan builds a new
    snapshot.
    """

    counts: Mapping[str, int] = field(default_factory=dict)
    window_days: int = 30
    commits_seen: int = 0

    def touch_count(self, file_path: str) -> int:
        return self.counts.get(file_path, 0)

    def __len__(self) -> int:
        return len(self.counts)


EMPTY_SNAPSHOT = ChurnSnapshot()


class HistoryProvider(Protocol):
    """Source of commits touching the project."""

    def log_since(self, window_days: int) -> list[Commit]:
        """Commits in the trailing window, newest first.

        Raises:
            HistoryError: If history cannot be read
        """
        ...

"""Version-history analysis: git log extraction and churn scoring."""

from .churn import ChurnScorer, build_snapshot
from .git_extractor import GitHistoryProvider
from .models import ChurnSnapshot, Commit, HistoryProvider

__all__ = [
    "ChurnScorer",
    "ChurnSnapshot",
    "Commit",
    "GitHistoryProvider",
    "HistoryProvider",
    "build_snapshot",
]

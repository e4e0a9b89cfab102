"""Watch mode: debounced re-scans driven by file-system events."""

from .scheduler import DEFAULT_DEBOUNCE_SECONDS, DebounceScheduler, ScanTrigger, SchedulerState
from .watcher import ProjectWatcher, SourceFilter, watch

__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "DebounceScheduler",
    "ProjectWatcher",
    "ScanTrigger",
    "SchedulerState",
    "SourceFilter",
    "watch",
]

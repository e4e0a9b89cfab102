"""File watcher that schedules debounced re-scans on source changes."""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from watchfiles import Change, watch as watch_changes

from ..analysis.engine import Scanner
from ..config import DEFAULT_IGNORE, PulseConfig
from ..logging_config import get_logger
from ..models import ScanResult
from ..scanning.languages import is_source_file
from ..temporal.models import HistoryProvider
from .scheduler import DEFAULT_DEBOUNCE_SECONDS, ScanTrigger

logger = get_logger(__name__)

# watchfiles' own batching window. Kept short; ScanTrigger does the real
# debouncing.
_BATCH_MS = 50

# How often the watch loop wakes up to check the stop event.
_RUST_TIMEOUT_MS = 1000

ChangeListener = Callable[[str], None]

_CHANGE_KINDS = {
    Change.added: "added",
    Change.modified: "changed",
    Change.deleted: "deleted",
}


class SourceFilter:
    """watchfiles filter: scannable source files outside ignored directories."""

    def __init__(self, root: str, ignore: Iterable[str] = DEFAULT_IGNORE) -> None:
        self.root = Path(root)
        self.ignore = frozenset(ignore)

    def __call__(self, change: Change, path: str) -> bool:
        p = Path(path)
        try:
            parts = p.relative_to(self.root).parts
        except ValueError:
            parts = p.parts
        if any(part in self.ignore for part in parts):
            return False
        return is_source_file(p.name)


class ProjectWatcher:
    """Watches a project tree and runs ``on_scan`` after each burst of changes.

    Listeners registered with ``on_added``/``on_changed``/``on_deleted`` see
    every accepted event immediately; the scan itself waits until the tree
    has been quiet for ``debounce_seconds``.

    ``pause()`` stops observing the file system. Events that happen while
    paused are not replayed, but a re-scan already pending when the pause
    began fires after ``resume()``.
    """

    def __init__(
        self,
        root: str,
        on_scan: Callable[[], None],
        ignore: Iterable[str] = DEFAULT_IGNORE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root = os.path.realpath(root)
        self.filter = SourceFilter(self.root, ignore)
        self.trigger = ScanTrigger(on_scan, debounce_seconds, clock=clock)
        self._listeners: dict[str, list[ChangeListener]] = {
            "added": [],
            "changed": [],
            "deleted": [],
        }
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._paused = False
        self._running = False

    def on_added(self, listener: ChangeListener) -> ChangeListener:
        self._listeners["added"].append(listener)
        return listener

    def on_changed(self, listener: ChangeListener) -> ChangeListener:
        self._listeners["changed"].append(listener)
        return listener

    def on_deleted(self, listener: ChangeListener) -> ChangeListener:
        self._listeners["deleted"].append(listener)
        return listener

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start observing and scheduling."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._paused = False
            self.trigger.start()
            self._start_observer()
        logger.info("Watching %s for changes", self.root)

    def stop(self) -> None:
        """Stop observing and cancel anything pending."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_observer()
            self.trigger.stop()
        logger.debug("Watcher stopped")

    def pause(self) -> None:
        with self._lock:
            if not self._running or self._paused:
                return
            self._paused = True
            self.trigger.pause()
            self._stop_observer()
        logger.info("Watching paused")

    def resume(self) -> None:
        with self._lock:
            if not self._running or not self._paused:
                return
            self._paused = False
            self._start_observer()
            self.trigger.resume()
        logger.info("Watching resumed")

    def dispatch(self, change: Change, path: str) -> None:
        """Handle one file-system event that passed the filter."""
        kind = _CHANGE_KINDS.get(change)
        if kind is None:
            return
        logger.debug("%s: %s", kind, path)
        for listener in self._listeners[kind]:
            try:
                listener(path)
            except Exception:
                logger.exception("Change listener %r failed for %s", listener, path)
        self.trigger.notify()

    def _start_observer(self) -> None:
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(stop_event,),
            name="pulse-watcher",
            daemon=True,
        )
        self._thread.start()

    def _stop_observer(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            if self._thread.is_alive():
                logger.warning("Watcher thread did not exit cleanly within 5 seconds")
        self._stop_event = None
        self._thread = None

    def _watch_loop(self, stop_event: threading.Event) -> None:
        """Background thread: forward filtered changes until stopped."""
        try:
            for changes in watch_changes(
                self.root,
                stop_event=stop_event,
                debounce=_BATCH_MS,
                rust_timeout=_RUST_TIMEOUT_MS,
                watch_filter=self.filter,
                raise_interrupt=False,
            ):
                if stop_event.is_set():
                    break
                for change, path in sorted(changes, key=lambda c: c[1]):
                    self.dispatch(change, path)
        except Exception:
            logger.exception("File watching stopped unexpectedly")


def watch(
    project_root: str,
    config: Optional[PulseConfig] = None,
    on_result: Optional[Callable[[ScanResult], None]] = None,
    history_provider: Optional[HistoryProvider] = None,
    initial_scan: bool = True,
) -> ProjectWatcher:
    """Scan ``project_root`` and keep re-scanning it as files change.

    Returns the started watcher; call ``stop()`` on it to end watching.
    ``on_result`` receives every finished ScanResult, the initial one
    included.
    """
    if config is None:
        config = PulseConfig(project_root=os.path.abspath(project_root))

    scanner = Scanner(config, history_provider=history_provider)

    def run_scan() -> None:
        result = scanner.scan(project_root)
        if on_result is not None:
            on_result(result)

    if initial_scan:
        run_scan()

    watcher = ProjectWatcher(
        project_root,
        run_scan,
        ignore=config.ignore,
        debounce_seconds=config.debounce_seconds,
    )
    watcher.start()
    return watcher

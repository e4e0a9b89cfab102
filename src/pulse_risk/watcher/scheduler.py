"""Debounced re-scan scheduling.

``DebounceScheduler`` is the state machine; it holds no threads and takes
the current time as an argument, so every transition is testable with a
fake clock:

    IDLE ──event──▶ PENDING(deadline) ──deadline reached──▶ SCANNING
                       ▲   │ event: deadline = now + delay      │
                       │   └────────────────────────────────────┤
                       └──── scan ends, events arrived meanwhile ┤
    IDLE ◀──────────── scan ends, no events ────────────────────┘

There is at most one pending deadline and at most one scan in flight.

``ScanTrigger`` drives the machine from a daemon thread and runs the scan
callback when a deadline passes.
"""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Callable, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.5


class SchedulerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SCANNING = "scanning"


class DebounceScheduler:
    """Single-slot debounce state machine. Not thread-safe by itself."""

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self.state = SchedulerState.IDLE
        self.deadline: Optional[float] = None
        # Deadline armed by events that arrived while a scan was running.
        self._rearm_deadline: Optional[float] = None

    def on_event(self, now: float) -> None:
        """Record a qualifying change; (re)starts the quiet period."""
        if self.state is SchedulerState.SCANNING:
            self._rearm_deadline = now + self.delay
            return
        self.state = SchedulerState.PENDING
        self.deadline = now + self.delay

    def due(self, now: float) -> bool:
        return (
            self.state is SchedulerState.PENDING
            and self.deadline is not None
            and now >= self.deadline
        )

    def remaining(self, now: float) -> Optional[float]:
        """Seconds until the pending deadline, or None if nothing is pending."""
        if self.state is not SchedulerState.PENDING or self.deadline is None:
            return None
        return max(0.0, self.deadline - now)

    def begin_scan(self) -> None:
        if self.state is not SchedulerState.PENDING:
            raise RuntimeError(f"cannot start a scan from state {self.state.value}")
        self.state = SchedulerState.SCANNING
        self.deadline = None

    def end_scan(self) -> None:
        if self.state is not SchedulerState.SCANNING:
            raise RuntimeError(f"no scan in flight (state {self.state.value})")
        if self._rearm_deadline is not None:
            self.state = SchedulerState.PENDING
            self.deadline = self._rearm_deadline
            self._rearm_deadline = None
        else:
            self.state = SchedulerState.IDLE


class ScanTrigger:
    """Runs ``on_fire`` once per debounced burst of events.

    ``notify()`` may be called from any thread. The callback always runs on
    the trigger's own thread, so scans never overlap. While paused, a
    deadline that passes is held and fires after ``resume()``.
    """

    def __init__(
        self,
        on_fire: Callable[[], None],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_fire = on_fire
        self._clock = clock
        self._machine = DebounceScheduler(delay)
        self._cond = threading.Condition()
        self._allowed = True
        self._stopped = False
        self._thread: Optional[threading.Thread] = None
        self.fired = 0

    @property
    def state(self) -> SchedulerState:
        with self._cond:
            return self._machine.state

    @property
    def paused(self) -> bool:
        with self._cond:
            return not self._allowed

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="pulse-scan-trigger", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        with self._cond:
            self._stopped = True
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Scan trigger did not exit within %.0f seconds (scan in flight?)", timeout)
            self._thread = None

    def notify(self) -> None:
        with self._cond:
            self._machine.on_event(self._clock())
            self._cond.notify_all()

    def pause(self) -> None:
        with self._cond:
            self._allowed = False

    def resume(self) -> None:
        with self._cond:
            self._allowed = True
            self._cond.notify_all()

    def wait_idle(self, timeout: float) -> bool:
        """Block until nothing is pending or running. For shutdown and tests."""
        end = time.monotonic() + timeout
        with self._cond:
            while self._machine.state is not SchedulerState.IDLE:
                left = end - time.monotonic()
                if left <= 0:
                    return False
                self._cond.wait(left)
            return True

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._stopped:
                    now = self._clock()
                    if self._allowed and self._machine.due(now):
                        self._machine.begin_scan()
                        break
                    timeout = self._machine.remaining(now) if self._allowed else None
                    self._cond.wait(timeout)
                if self._stopped:
                    return

            try:
                self._on_fire()
            except Exception:
                # Reported once; the next burst of events is the retry.
                logger.exception("Scheduled re-scan failed")
            finally:
                with self._cond:
                    self.fired += 1
                    self._machine.end_scan()
                    self._cond.notify_all()

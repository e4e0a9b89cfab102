"""Tests for debounced re-scan scheduling."""

import threading
import time

import pytest

from pulse_risk.watcher.scheduler import DebounceScheduler, ScanTrigger, SchedulerState


class TestDebounceScheduler:
    """State transitions with explicit timestamps."""

    def test_starts_idle(self):
        scheduler = DebounceScheduler(1.5)
        assert scheduler.state is SchedulerState.IDLE
        assert not scheduler.due(100.0)
        assert scheduler.remaining(0.0) is None

    def test_burst_fires_once_after_last_event(self):
        """Events at 0.0, 0.5 and 1.0 fire once, 1.5s after the last."""
        scheduler = DebounceScheduler(1.5)
        for t in (0.0, 0.5, 1.0):
            scheduler.on_event(t)

        assert scheduler.state is SchedulerState.PENDING
        assert not scheduler.due(2.0)
        assert not scheduler.due(2.49)
        assert scheduler.due(2.5)
        assert scheduler.remaining(2.0) == pytest.approx(0.5)

        scheduler.begin_scan()
        assert scheduler.state is SchedulerState.SCANNING
        scheduler.end_scan()
        assert scheduler.state is SchedulerState.IDLE
        assert not scheduler.due(10.0)

    def test_event_during_scan_rearms(self):
        scheduler = DebounceScheduler(1.5)
        scheduler.on_event(0.0)
        scheduler.begin_scan()

        scheduler.on_event(2.0)
        assert scheduler.state is SchedulerState.SCANNING
        assert not scheduler.due(10.0)

        scheduler.end_scan()
        assert scheduler.state is SchedulerState.PENDING
        assert scheduler.deadline == pytest.approx(3.5)

    def test_latest_event_during_scan_wins(self):
        scheduler = DebounceScheduler(1.0)
        scheduler.on_event(0.0)
        scheduler.begin_scan()
        scheduler.on_event(2.0)
        scheduler.on_event(3.0)
        scheduler.end_scan()
        assert scheduler.deadline == pytest.approx(4.0)

    def test_begin_requires_pending(self):
        with pytest.raises(RuntimeError):
            DebounceScheduler().begin_scan()

    def test_end_requires_scan(self):
        with pytest.raises(RuntimeError):
            DebounceScheduler().end_scan()

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            DebounceScheduler(-1)


DELAY = 0.05


class TestScanTrigger:
    """Threaded trigger with a short real delay."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def trigger(self, calls):
        trigger = ScanTrigger(lambda: calls.append(time.monotonic()), delay=DELAY)
        trigger.start()
        yield trigger
        trigger.stop()

    def test_burst_coalesced(self, trigger, calls):
        for _ in range(5):
            trigger.notify()
        assert trigger.wait_idle(5.0)
        assert len(calls) == 1
        assert trigger.fired == 1

    def test_separate_bursts_fire_separately(self, trigger, calls):
        trigger.notify()
        assert trigger.wait_idle(5.0)
        trigger.notify()
        assert trigger.wait_idle(5.0)
        assert len(calls) == 2

    def test_waits_for_quiet_period(self, trigger, calls):
        start = time.monotonic()
        trigger.notify()
        assert trigger.wait_idle(5.0)
        assert calls[0] - start >= DELAY

    def test_paused_trigger_holds_pending_scan(self, trigger, calls):
        trigger.pause()
        trigger.notify()
        time.sleep(DELAY * 4)
        assert calls == []
        assert trigger.state is SchedulerState.PENDING

        trigger.resume()
        assert trigger.wait_idle(5.0)
        assert len(calls) == 1

    def test_failure_reported_and_next_burst_retries(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("scan failed")

        trigger = ScanTrigger(flaky, delay=DELAY)
        trigger.start()
        try:
            trigger.notify()
            assert trigger.wait_idle(5.0)
            assert len(attempts) == 1
            assert trigger.state is SchedulerState.IDLE

            trigger.notify()
            assert trigger.wait_idle(5.0)
            assert len(attempts) == 2
        finally:
            trigger.stop()

    def test_event_during_scan_causes_one_more_scan(self):
        started = threading.Event()
        release = threading.Event()
        runs = []

        def slow_scan():
            runs.append(1)
            if len(runs) == 1:
                started.set()
                release.wait(5.0)

        trigger = ScanTrigger(slow_scan, delay=DELAY)
        trigger.start()
        try:
            trigger.notify()
            assert started.wait(5.0)
            trigger.notify()
            trigger.notify()
            release.set()
            assert trigger.wait_idle(5.0)
            assert len(runs) == 2
        finally:
            trigger.stop()

    def test_stop_cancels_pending(self, calls):
        trigger = ScanTrigger(lambda: calls.append(1), delay=10.0)
        trigger.start()
        trigger.notify()
        trigger.stop()
        assert calls == []

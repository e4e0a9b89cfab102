"""Tests for the project watcher."""

import os
import threading

import pytest
from watchfiles import Change

from pulse_risk.config import DEFAULT_IGNORE, PulseConfig
from pulse_risk.watcher import ProjectWatcher, SourceFilter, watch
from pulse_risk.watcher.scheduler import SchedulerState


class TestSourceFilter:
    """Only scannable sources outside ignored directories pass."""

    @pytest.fixture
    def source_filter(self):
        return SourceFilter("/work/build/app", DEFAULT_IGNORE)

    @pytest.mark.parametrize(
        "path",
        ["/work/build/app/src/a.ts", "/work/build/app/b.py", "/work/build/app/lib/c.jsx"],
    )
    def test_accepts_sources(self, source_filter, path):
        """The root's own ancestors never count as ignored directories."""
        assert source_filter(Change.modified, path)

    @pytest.mark.parametrize(
        "path",
        [
            "/work/build/app/node_modules/x/index.js",
            "/work/build/app/dist/out.js",
            "/work/build/app/.git/HEAD",
            "/work/build/app/README.md",
            "/work/build/app/src/a.test.ts",
            "/work/build/app/src/a.min.js",
        ],
    )
    def test_rejects_noise(self, source_filter, path):
        assert not source_filter(Change.added, path)

    def test_deleted_sources_pass(self, source_filter):
        assert source_filter(Change.deleted, "/work/build/app/src/gone.ts")


class TestDispatch:
    """Event dispatch without a running observer."""

    @pytest.fixture
    def watcher(self, tmp_path):
        return ProjectWatcher(str(tmp_path), on_scan=lambda: None, debounce_seconds=10.0)

    def test_listeners_by_change_kind(self, watcher):
        seen = []
        watcher.on_added(lambda p: seen.append(("added", p)))
        watcher.on_changed(lambda p: seen.append(("changed", p)))
        watcher.on_deleted(lambda p: seen.append(("deleted", p)))

        watcher.dispatch(Change.added, "/p/a.ts")
        watcher.dispatch(Change.modified, "/p/b.ts")
        watcher.dispatch(Change.deleted, "/p/c.ts")

        assert seen == [("added", "/p/a.ts"), ("changed", "/p/b.ts"), ("deleted", "/p/c.ts")]

    def test_dispatch_arms_scan(self, watcher):
        watcher.dispatch(Change.modified, "/p/a.ts")
        assert watcher.trigger.state is SchedulerState.PENDING

    def test_failing_listener_isolated(self, watcher):
        seen = []

        @watcher.on_changed
        def broken(path):
            raise RuntimeError("listener bug")

        watcher.on_changed(seen.append)
        watcher.dispatch(Change.modified, "/p/a.ts")

        assert seen == ["/p/a.ts"]
        assert watcher.trigger.state is SchedulerState.PENDING


class TestLifecycle:
    """Start, pause, resume and stop with a real observer."""

    def test_pause_resume(self, tmp_path):
        watcher = ProjectWatcher(str(tmp_path), on_scan=lambda: None)
        watcher.start()
        try:
            assert watcher.running
            watcher.pause()
            assert watcher.paused
            assert watcher.trigger.paused
            watcher.resume()
            assert not watcher.paused
            assert not watcher.trigger.paused
        finally:
            watcher.stop()
        assert not watcher.running

    def test_pause_when_stopped_is_noop(self, tmp_path):
        watcher = ProjectWatcher(str(tmp_path), on_scan=lambda: None)
        watcher.pause()
        assert not watcher.paused

    def test_pending_scan_survives_pause(self, tmp_path):
        fired = threading.Event()
        watcher = ProjectWatcher(str(tmp_path), on_scan=fired.set, debounce_seconds=0.05)
        watcher.start()
        try:
            watcher.pause()
            watcher.dispatch(Change.modified, str(tmp_path / "a.ts"))
            assert not fired.wait(0.2)
            watcher.resume()
            assert fired.wait(5.0)
        finally:
            watcher.stop()


@pytest.mark.slow
class TestWatchEndToEnd:
    """File-system events drive real re-scans."""

    def test_new_file_triggers_rescan(self, make_project):
        root = make_project({"src/a.ts": "export const a = () => 1;\n"})
        results = []
        second = threading.Event()

        def on_result(result):
            results.append(result)
            if len(results) >= 2:
                second.set()

        config = PulseConfig(project_root=root, debounce_seconds=0.2)
        watcher = watch(root, config, on_result=on_result)
        try:
            assert len(results) == 1
            with open(os.path.join(root, "src", "b.ts"), "w") as f:
                f.write("export function b(x) { if (x) return 1; }\n")
            assert second.wait(15.0)
        finally:
            watcher.stop()

        assert len(results[-1].files) == 2

"""
Tests for AppInitializer — Phased startup

Tests verify:
- Each phase runs at most once; re-entry is a PhaseError
- Phase prerequisites (core first, gulp only headless)
- init_components joins all four tasks
- A task failure surfaces with its own type, not a wrapper
- An interrupted join becomes InitializationAborted
- init_core failure writes to stderr and exits with status 1
- Settings failures are logged, never raised
"""

import logging
import threading
import time

import pytest

from gulp.errors import InitializationAborted, PhaseError
from gulp.exclusion import ExclusionRuleManager
from gulp.initializer import (
    AppInitializer, ComponentPool, InitializerConfig, Phase, PhaseState,
    TaskKind, TaskStatus, independent_task, store_task,
)
from gulp.initializer.phases import PhaseTracker, check_entry, check_transition


class ComponentBroken(Exception):
    """Distinct error type raised by a failing test task."""


@pytest.fixture
def make_initializer(config):
    """Factory for initializers; stores are closed after the test."""
    created = []

    def make(**kwargs):
        kwargs.setdefault("headless", True)
        kwargs.setdefault("config", config)
        kwargs.setdefault("initializer_config", InitializerConfig(workers=4))
        init = AppInitializer(**kwargs)
        created.append(init)
        return init

    yield make
    for init in created:
        init.components.store.close()


@pytest.fixture
def ready_for_components(make_initializer):
    """Factory for headless initializers that finished init_core and init_gulp."""
    def make(**kwargs):
        init = make_initializer(**kwargs)
        init.init_core()
        init.init_gulp()
        return init
    return make


# =============================================================================
# Phase State Machine
# =============================================================================

class TestPhaseTransitions:
    """Validated one-way transitions."""

    def test_allowed(self):
        assert check_transition(PhaseState.PENDING, PhaseState.RUNNING) is None
        assert check_transition(PhaseState.RUNNING, PhaseState.READY) is None
        assert check_transition(PhaseState.RUNNING, PhaseState.FAILED) is None

    @pytest.mark.parametrize("current, target", [
        (PhaseState.PENDING, PhaseState.READY),
        (PhaseState.READY, PhaseState.PENDING),
        (PhaseState.READY, PhaseState.RUNNING),
        (PhaseState.FAILED, PhaseState.RUNNING),
    ])
    def test_rejected(self, current, target):
        assert check_transition(current, target) is not None

    def test_entry_rules(self):
        states = {p: PhaseState.PENDING for p in Phase}
        assert check_entry(Phase.CORE, states, headless=False) is None
        assert "init_core" in check_entry(Phase.GULP, states, headless=True)

        states[Phase.CORE] = PhaseState.READY
        assert "headless" in check_entry(Phase.GULP, states, headless=False)
        assert check_entry(Phase.GULP, states, headless=True) is None
        assert "init_gulp" in check_entry(Phase.COMPONENTS, states, headless=True)
        assert check_entry(Phase.COMPONENTS, states, headless=False) is None

    def test_tracker_one_shot(self):
        tracker = PhaseTracker()
        tracker.begin(Phase.CORE)
        tracker.complete(Phase.CORE)
        assert tracker.is_ready(Phase.CORE)
        with pytest.raises(PhaseError, match="already called"):
            tracker.begin(Phase.CORE)

    def test_failed_phase_cannot_restart(self):
        tracker = PhaseTracker()
        tracker.begin(Phase.CORE)
        tracker.fail(Phase.CORE)
        with pytest.raises(PhaseError):
            tracker.begin(Phase.CORE)


# =============================================================================
# Tasks and Pool
# =============================================================================

class TestTasks:
    """Task factories and ids."""

    def test_kinds(self):
        assert store_task(lambda: None, name="s").kind is TaskKind.STORE_DEPENDENT
        assert independent_task(lambda: None, name="i").kind is TaskKind.INDEPENDENT
        assert store_task(lambda: None).needs_store

    def test_ids_unique_hex(self):
        ids = {independent_task(lambda: None, name="same").id for _ in range(50)}
        assert len(ids) == 50
        for task_id in ids:
            assert len(task_id) == 12
            int(task_id, 16)


class TestComponentPool:
    """Fan-out and join."""

    def test_run_all_results(self):
        pool = ComponentPool(InitializerConfig(workers=2))
        try:
            results = pool.run_all([
                independent_task(lambda: 1, name="one"),
                independent_task(lambda: 2, name="two"),
            ])
        finally:
            pool.shutdown()
        assert results["one"].result == 1
        assert results["two"].status is TaskStatus.COMPLETED
        assert pool.stats().completed_tasks == 2

    def test_runs_concurrently(self):
        """Four tasks that wait for each other only finish if run in parallel."""
        barrier = threading.Barrier(4, timeout=5)
        pool = ComponentPool(InitializerConfig(workers=4))
        try:
            results = pool.run_all([independent_task(barrier.wait, name=f"t{i}") for i in range(4)])
        finally:
            pool.shutdown()
        assert len(results) == 4

    def test_failure_unwrapped(self):
        def broken():
            raise ComponentBroken("disk on fire")

        pool = ComponentPool(InitializerConfig(workers=2))
        try:
            with pytest.raises(ComponentBroken, match="disk on fire"):
                pool.run_all([independent_task(broken, name="broken")])
        finally:
            pool.shutdown()
        assert pool.stats().failed_tasks == 1

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            ComponentPool(InitializerConfig(workers=0))


# =============================================================================
# AppInitializer
# =============================================================================

class TestInitCore:
    """Logging phase."""

    def test_twice_is_precondition_violation(self, make_initializer):
        init = make_initializer()
        init.init_core()
        assert init.is_ready(Phase.CORE)
        assert init.recent_logs is not None
        with pytest.raises(PhaseError):
            init.init_core()

    def test_failure_exits(self, make_initializer, monkeypatch, capsys):
        """Logging failure goes to stderr and exits with status 1."""
        def broken_logging(headless, config):
            raise OSError("log directory is read-only")

        monkeypatch.setattr("gulp.initializer.init_logging", broken_logging)
        init = make_initializer()

        with pytest.raises(SystemExit) as exc_info:
            init.init_core()

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "[FATAL ERROR]" in err
        assert "log directory is read-only" in err
        assert init.phases.state(Phase.CORE) is PhaseState.FAILED


class TestInitGulp:
    """Store phase."""

    def test_opens_store_and_primes_history(self, make_initializer, config):
        init = make_initializer()
        init.init_core()
        init.init_gulp()
        assert init.components.store.is_open
        assert init.components.store.path == config.store.store_path
        assert init.packets is not None
        assert len(init.packets) == 0
        assert init.packets.restored is False

    def test_requires_headless(self, make_initializer):
        init = make_initializer(headless=False)
        init.init_core()
        with pytest.raises(PhaseError, match="headless"):
            init.init_gulp()

    def test_requires_core(self, make_initializer):
        with pytest.raises(PhaseError, match="init_core"):
            make_initializer().init_gulp()

    def test_twice(self, ready_for_components):
        init = ready_for_components()
        with pytest.raises(PhaseError):
            init.init_gulp()


class TestInitComponents:
    """Concurrent component phase."""

    def test_default_tasks(self, ready_for_components):
        """The four real components come online."""
        init = ready_for_components()
        init.init_components()

        assert set(init.results) == {"client-keys", "listen-ports", "encoders", "vulcheckers"}
        kinds = {t.name: t.kind for t in init.component_tasks()}
        assert kinds["client-keys"] is TaskKind.STORE_DEPENDENT
        assert kinds["encoders"] is TaskKind.INDEPENDENT
        assert init.components.client_keys.loaded
        assert init.components.listen_ports.loaded
        assert init.components.encoders.scanned
        assert init.components.vulcheckers.scanned

    def test_twice(self, ready_for_components):
        init = ready_for_components()
        init.init_components()
        with pytest.raises(PhaseError, match="already called"):
            init.init_components()

    def test_twice_reports_reentry_after_store_closed(self, ready_for_components):
        """Re-entry is checked before the store."""
        init = ready_for_components()
        init.init_components()
        init.components.store.close()
        with pytest.raises(PhaseError, match="already called"):
            init.init_components()

    def test_missing_store_does_not_consume_phase(self, make_initializer, tmp_path):
        init = make_initializer(headless=False)
        init.init_core()
        with pytest.raises(PhaseError, match="open resource store"):
            init.init_components()
        assert init.phases.state(Phase.COMPONENTS) is PhaseState.PENDING

        init.components.store.open_at(tmp_path / "late.sqlite3")
        init.init_components()
        assert init.is_ready(Phase.COMPONENTS)

    def test_pool_stats_logged(self, ready_for_components, caplog):
        init = ready_for_components(tasks=[independent_task(lambda: None, name="t")])
        with caplog.at_level(logging.DEBUG, logger="gulp.initializer"):
            init.init_components()
        assert "'completed_tasks': 1" in caplog.text

    def test_requires_gulp_when_headless(self, make_initializer):
        init = make_initializer()
        init.init_core()
        init.components.store.open_at(init.config.store.store_path)
        with pytest.raises(PhaseError, match="init_gulp"):
            init.init_components()

    def test_requires_open_store(self, make_initializer):
        init = make_initializer(headless=False)
        init.init_core()
        with pytest.raises(PhaseError, match="open resource store"):
            init.init_components()

    def test_non_headless_with_external_store(self, make_initializer, tmp_path):
        """Outside headless mode the store is opened by the embedder."""
        init = make_initializer(headless=False)
        init.init_core()
        init.components.store.open_at(tmp_path / "gui.sqlite3")
        init.init_components()
        assert init.is_ready(Phase.COMPONENTS)

    def test_waits_for_all_tasks(self, ready_for_components):
        finished = []

        def slow(name, delay):
            def run():
                time.sleep(delay)
                finished.append(name)
            return run

        tasks = [
            store_task(slow("a", 0.05), name="a"),
            store_task(slow("b", 0.01), name="b"),
            independent_task(slow("c", 0.1), name="c"),
            independent_task(slow("d", 0.0), name="d"),
        ]
        init = ready_for_components(tasks=tasks)
        init.init_components()

        assert sorted(finished) == ["a", "b", "c", "d"]

    def test_failure_keeps_type(self, ready_for_components):
        """The caller sees the task's own exception type."""
        def broken():
            raise ComponentBroken("partition unreadable")

        tasks = [
            store_task(broken, name="broken"),
            store_task(lambda: None, name="ok-1"),
            independent_task(lambda: None, name="ok-2"),
            independent_task(lambda: None, name="ok-3"),
        ]
        init = ready_for_components(tasks=tasks)

        with pytest.raises(ComponentBroken, match="partition unreadable"):
            init.init_components()
        assert init.phases.state(Phase.COMPONENTS) is PhaseState.FAILED

    def test_interrupted_join(self, ready_for_components, monkeypatch):
        """KeyboardInterrupt during the join becomes InitializationAborted."""
        def interrupted_wait(*args, **kwargs):
            raise KeyboardInterrupt()

        init = ready_for_components(tasks=[independent_task(lambda: None, name="t")])
        monkeypatch.setattr("gulp.initializer.pools.wait", interrupted_wait)

        with pytest.raises(InitializationAborted) as exc_info:
            init.init_components()

        assert exc_info.value.interrupted is True
        assert isinstance(exc_info.value.__cause__, KeyboardInterrupt)
        assert init.phases.state(Phase.COMPONENTS) is PhaseState.FAILED


class TestSettings:
    """Settings applied after the join."""

    def test_applied(self, ready_for_components, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(
            '{"listenPorts": [{"port": 8080, "enabled": true}],'
            ' "exclusionRules": [{"type": "host", "pattern": "cdn.local"}]}',
            encoding="utf-8",
        )
        exclusions = ExclusionRuleManager()
        init = ready_for_components(settings_path=str(settings), exclusions=exclusions)
        init.init_components()

        assert [p.port for p in init.components.listen_ports.active_ports()] == [8080]
        assert exclusions.should_exclude("GET", "http://cdn.local/")
        assert init.exclusions is exclusions

    def test_empty_manager_is_kept(self, make_initializer):
        """An empty rule manager is still the caller's manager."""
        exclusions = ExclusionRuleManager()
        assert len(exclusions) == 0
        init = make_initializer(exclusions=exclusions)
        assert init.exclusions is exclusions

    def test_bad_settings_logged_not_raised(self, ready_for_components, tmp_path, caplog):
        settings = tmp_path / "settings.json"
        settings.write_text("[1, 2, 3]", encoding="utf-8")
        init = ready_for_components(settings_path=str(settings))

        with caplog.at_level(logging.ERROR, logger="gulp"):
            init.init_components()

        assert init.is_ready(Phase.COMPONENTS)
        assert "Failed to apply settings" in caplog.text

    def test_missing_file_logged(self, ready_for_components, tmp_path, caplog):
        init = ready_for_components(settings_path=str(tmp_path / "missing.json"))
        with caplog.at_level(logging.ERROR, logger="gulp"):
            init.init_components()
        assert "Failed to apply settings" in caplog.text

"""
Tests for the SimulationRunner stepping loop.

Verifies:
- Runs a fixed number of ticks on its own thread (after a restart)
- Stops on request
- Honors the field's pause flag
- Surfaces tick failures to the caller
- Concurrent reconfiguration never shows a tick a half-built population
"""

import time

import pytest

from contagion.simulation import SimulationField
from contagion.data_types import FieldConfig
from contagion.runner import SimulationRunner


def make_field(**overrides) -> SimulationField:
    params = {'seed': 4242, 'subject_count': 30}
    params.update(overrides)
    return SimulationField(FieldConfig(**params))


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_runs_max_ticks_after_restart():
    field = make_field()
    for _ in range(10):
        field.advance()

    runner = SimulationRunner(field, delay=0.0, max_ticks=25)
    runner.start()
    runner.join(timeout=10.0)

    assert not runner.running
    assert runner.ticks_run == 25
    # Restart reset the tick to 31 before the first of the 25 ticks
    assert field.tick == 31 + 25
    assert len(field.get_time_series()) == 25


def test_stop_ends_loop():
    field = make_field()
    runner = SimulationRunner(field, delay=0.001)
    runner.start()

    assert _wait_for(lambda: runner.ticks_run >= 3)
    runner.stop()

    assert not runner.running
    ticks = field.tick
    time.sleep(0.05)
    assert field.tick == ticks


def test_paused_field_does_not_advance():
    field = make_field()
    field.set_paused(True)
    start = field.tick

    runner = SimulationRunner(field, delay=0.001)
    runner.start(restart=False)
    time.sleep(0.05)

    assert runner.running
    assert runner.ticks_run == 0
    assert field.tick == start

    field.set_paused(False)
    assert _wait_for(lambda: runner.ticks_run >= 2)
    runner.stop()


def test_tick_failure_is_reraised():
    field = make_field()

    def broken(f):
        raise RuntimeError("listener failed")

    field.add_tick_listener(broken)
    runner = SimulationRunner(field, delay=0.0)
    runner.start()

    with pytest.raises(RuntimeError, match="listener failed"):
        runner.join(timeout=10.0)

    assert not runner.running
    assert runner.ticks_run == 0


def test_ticks_never_see_partial_rebuild():
    field = make_field(initial_sick=2)
    seen = []

    def check(f):
        seen.append((len(f.subjects), f.config.subject_count, sum(f.census())))

    field.add_tick_listener(check)
    runner = SimulationRunner(field, delay=0.0)
    runner.start()

    for i in range(60):
        if i % 2:
            field.set_subject_count(20 + i)
        else:
            field.configure(initial_sick=1 + i % 5)

    assert _wait_for(lambda: len(seen) >= 10)
    runner.stop()

    assert not runner.running
    for population, configured, counted in list(seen):
        assert population == configured == counted

"""
Tests for Subject physics and status bookkeeping.

Verifies:
- Force integration, friction and movement order
- Boundary reflection
- Destination seeking and expiry
- Scheduled recovery (INFECTED -> REMOVED)
- REMOVED subjects are frozen (but clamped into shrunk bounds)
"""

import numpy as np
import pytest

from contagion.subject import Subject
from contagion.health import HealthStatus, InvalidTransitionError
from contagion.constants import NO_TIME


LO = np.array([0.0, 0.0])
HI = np.array([640.0, 480.0])
ZERO = np.zeros(2)


def _update(subject, tick=100, force=ZERO, mass=10.0, friction=0.98, factor=1.0):
    return subject.update(mass, force, LO, HI, factor, tick, friction)


def test_force_then_friction_then_move():
    s = Subject(position=[100.0, 100.0], velocity=[1.0, 0.0])
    _update(s, force=np.array([10.0, 0.0]))

    # (1 + 10/10) * 0.98 = 1.96
    assert np.allclose(s.velocity, [1.96, 0.0])
    assert np.allclose(s.position, [101.96, 100.0])


def test_boundary_reflection():
    s = Subject(position=[638.0, 10.0], velocity=[5.0, 0.0])
    _update(s)

    assert np.allclose(s.position, [640.0, 10.0])
    assert np.allclose(s.velocity, [-4.9, 0.0])


def test_destination_pulls_toward_goal():
    s = Subject(position=[100.0, 100.0], velocity=[0.0, 0.0])
    s.assign_destination(np.array([200.0, 100.0]), return_time=1000)
    _update(s, tick=1)

    assert s.velocity[0] > 0.0
    assert np.isclose(s.velocity[1], 0.0)
    assert s.has_destination


def test_destination_force_fades_at_arrival():
    s = Subject(position=[100.0, 100.0], velocity=[0.0, 0.0])
    assert np.allclose(s.destination_force(1.0), [0.0, 0.0])

    s.assign_destination(np.array([100.25, 100.0]), return_time=10)
    assert np.allclose(s.destination_force(1.0), [0.25, 0.0])

    s.assign_destination(np.array([150.0, 100.0]), return_time=10)
    assert np.allclose(s.destination_force(1.0), [1.0, 0.0])


def test_destination_expires_at_return_time():
    s = Subject(position=[100.0, 100.0], velocity=[0.0, 0.0])
    s.assign_destination(np.array([300.0, 300.0]), return_time=50)

    _update(s, tick=49)
    assert s.has_destination

    _update(s, tick=50)
    assert not s.has_destination
    assert s.return_time is None


def test_recovery_at_change_time():
    s = Subject(position=[100.0, 100.0], velocity=[0.0, 0.0])
    s.update_health(HealthStatus.INFECTED, 10, 5)
    assert s.event_time == 10 and s.change_time == 15

    assert not _update(s, tick=14)
    assert s.status is HealthStatus.INFECTED

    assert _update(s, tick=15)
    assert s.status is HealthStatus.REMOVED
    assert s.event_time == 15
    assert s.change_time == NO_TIME


def test_removed_subject_is_frozen():
    s = Subject(position=[100.0, 100.0], velocity=[2.0, 2.0])
    s.update_health(HealthStatus.INFECTED, 0, 1)
    _update(s, tick=1)
    assert s.status is HealthStatus.REMOVED

    frozen_pos = s.position.copy()
    for tick in range(2, 20):
        assert not _update(s, tick=tick, force=np.array([5.0, 5.0]))
    assert np.allclose(s.position, frozen_pos)

    with pytest.raises(InvalidTransitionError):
        s.update_health(HealthStatus.INFECTED, 30, 10)


def test_removed_subject_clamped_into_shrunk_bounds():
    s = Subject(position=[600.0, 400.0], velocity=[0.0, 0.0])
    s.update_health(HealthStatus.INFECTED, 0, 1)
    _update(s, tick=1)
    assert s.status is HealthStatus.REMOVED

    small_hi = np.array([50.0, 50.0])
    assert not s.update(10.0, ZERO, LO, small_hi, 1.0, 2, 0.98)
    assert np.allclose(s.position, [50.0, 50.0])


def test_status_age_and_dict_roundtrip():
    s = Subject(position=[1.0, 2.0], velocity=[0.5, -0.5], event_time=7)
    s.assign_destination(np.array([5.0, 5.0]), return_time=40)

    data = s.to_dict(tick=12)
    assert data['status'] == 'susceptible'
    assert data['status_age'] == 5

    restored = Subject.from_dict(data)
    assert np.allclose(restored.position, s.position)
    assert np.allclose(restored.destination, [5.0, 5.0])
    assert restored.return_time == 40
    assert restored.status is HealthStatus.SUSCEPTIBLE

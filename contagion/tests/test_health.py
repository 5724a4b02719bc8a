import pytest

from contagion.health import HealthStatus, InvalidTransitionError, check_transition


def test_column_order():
    assert HealthStatus.SUSCEPTIBLE.index == 0
    assert HealthStatus.INFECTED.index == 1
    assert HealthStatus.REMOVED.index == 2


def test_legal_transitions():
    assert HealthStatus.SUSCEPTIBLE.can_transition_to(HealthStatus.INFECTED)
    assert HealthStatus.INFECTED.can_transition_to(HealthStatus.REMOVED)
    check_transition(HealthStatus.SUSCEPTIBLE, HealthStatus.INFECTED)


def test_illegal_transitions():
    assert not HealthStatus.SUSCEPTIBLE.can_transition_to(HealthStatus.REMOVED)
    assert not HealthStatus.INFECTED.can_transition_to(HealthStatus.SUSCEPTIBLE)
    with pytest.raises(InvalidTransitionError):
        check_transition(HealthStatus.INFECTED, HealthStatus.INFECTED)


def test_removed_is_absorbing():
    assert HealthStatus.REMOVED.is_terminal
    for target in HealthStatus:
        assert not HealthStatus.REMOVED.can_transition_to(target)
        with pytest.raises(InvalidTransitionError):
            check_transition(HealthStatus.REMOVED, target)

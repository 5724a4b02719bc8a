"""
Health status state machine.

Three-state contagion model: SUSCEPTIBLE -> INFECTED -> REMOVED.
REMOVED is absorbing; no transition leaves it.
"""

from enum import Enum


class InvalidTransitionError(Exception):
    """Raised when a subject is moved along an edge the model does not allow"""
    pass


class HealthStatus(Enum):
    """Health state of a subject (declaration order = statistics column order)"""
    SUSCEPTIBLE = "susceptible"
    INFECTED = "infected"
    REMOVED = "removed"

    @property
    def index(self) -> int:
        """Column of this status in per-tick count rows"""
        return _ORDER.index(self)

    @property
    def is_terminal(self) -> bool:
        return self is HealthStatus.REMOVED

    def can_transition_to(self, target: 'HealthStatus') -> bool:
        """Check whether target is a legal next state"""
        return target in _TRANSITIONS[self]


_ORDER = list(HealthStatus)

_TRANSITIONS = {
    HealthStatus.SUSCEPTIBLE: {HealthStatus.INFECTED},
    HealthStatus.INFECTED: {HealthStatus.REMOVED},
    HealthStatus.REMOVED: set(),
}


def check_transition(current: HealthStatus, target: HealthStatus):
    """
    Validate a status change.

    Raises:
        InvalidTransitionError: If target is not reachable from current
    """
    if not current.can_transition_to(target):
        raise InvalidTransitionError(
            f"Illegal health transition {current.name} -> {target.name}"
        )

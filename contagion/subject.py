"""
Subject runtime representation.

Subjects are spawned by SimulationField.initialize() and exist for one run.
Each subject has a position, velocity, health status, status timing and an
optional travel destination.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .health import HealthStatus, check_transition
from .spatial import normalize, reflect_into_bounds
from .constants import DESTINATION_ARRIVAL_RADIUS, NO_TIME


@dataclass
class Subject:
    """
    Runtime subject in the simulation field.

    Attributes:
        position: 2D position [x, y]
        velocity: 2D velocity [vx, vy] per tick
        status: Current health status
        event_time: Tick the current status began (creation index if never changed)
        change_time: Tick the current status is scheduled to end (-1 = none)
        destination: Travel goal [x, y] or None
        return_time: Tick at which travel stops, or None
    """
    position: np.ndarray  # [x, y] float64
    velocity: np.ndarray  # [vx, vy] float64
    status: HealthStatus = HealthStatus.SUSCEPTIBLE
    event_time: int = 0
    change_time: int = NO_TIME
    destination: Optional[np.ndarray] = None
    return_time: Optional[int] = None

    def __post_init__(self):
        """Ensure position, velocity and destination are float64 arrays"""
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        if self.destination is not None:
            self.destination = np.array(self.destination, dtype=np.float64)

    @property
    def has_destination(self) -> bool:
        return self.destination is not None

    def status_age(self, tick: int) -> int:
        """Ticks spent in the current status (animation phase for renderers)"""
        return tick - self.event_time

    def update_health(self, status: HealthStatus, tick: int, duration: int = NO_TIME):
        """
        Move to a new health status.

        Args:
            status: Target status (must be reachable from the current one)
            tick: Tick the new status begins
            duration: Ticks until the status is due to change (-1 = never)

        Raises:
            InvalidTransitionError: If the transition is not allowed
        """
        check_transition(self.status, status)
        self.status = status
        self.event_time = tick
        self.change_time = tick + duration if duration >= 0 else NO_TIME

    def is_time_to_change(self, tick: int) -> bool:
        """True once an infected subject has reached its scheduled recovery tick"""
        return (
            self.status is HealthStatus.INFECTED
            and self.change_time != NO_TIME
            and tick >= self.change_time
        )

    def assign_destination(self, destination: np.ndarray, return_time: int):
        """
        Send subject toward a point until return_time.

        Args:
            destination: Goal [x, y]
            return_time: Tick at which travel ends
        """
        self.destination = np.array(destination, dtype=np.float64)
        self.return_time = int(return_time)

    def clear_destination(self):
        self.destination = None
        self.return_time = None

    def destination_force(self, factor: float) -> np.ndarray:
        """
        Seek force toward the destination.

        Fixed magnitude `factor` while far away, falling off linearly inside
        DESTINATION_ARRIVAL_RADIUS so the subject settles on the goal.

        Returns:
            Force [fx, fy] (zero when no destination is set)
        """
        if self.destination is None:
            return np.zeros(2, dtype=np.float64)

        direction, distance = normalize(self.destination - self.position)
        scale = min(1.0, distance / DESTINATION_ARRIVAL_RADIUS)
        return direction * factor * scale

    def update(
        self,
        mass: float,
        random_force: np.ndarray,
        lo_bound: np.ndarray,
        hi_bound: np.ndarray,
        destination_factor: float,
        tick: int,
        friction_factor: float
    ) -> bool:
        """
        Advance physics and status timers by one tick.

        Order: force integration, friction, movement, boundary reflection,
        travel expiry, recovery check. REMOVED subjects do not move, but are
        still clamped into the bounds when the field shrinks under them.

        Args:
            mass: Subject mass (force / mass = acceleration)
            random_force: Random jostling force [fx, fy] for this tick
            lo_bound: Field lower corner
            hi_bound: Field upper corner
            destination_factor: Seek force strength
            tick: Current tick
            friction_factor: Multiplicative velocity decay in (0, 1)

        Returns:
            True if the subject became REMOVED this tick
        """
        if self.status is HealthStatus.REMOVED:
            reflect_into_bounds(self.position, self.velocity, lo_bound, hi_bound)
            return False

        force = random_force + self.destination_force(destination_factor)
        self.velocity = (self.velocity + force / mass) * friction_factor
        self.position += self.velocity

        reflect_into_bounds(self.position, self.velocity, lo_bound, hi_bound)

        if self.destination is not None and tick >= self.return_time:
            self.clear_destination()

        if self.is_time_to_change(tick):
            self.update_health(HealthStatus.REMOVED, tick, NO_TIME)
            return True

        return False

    def to_dict(self, tick: Optional[int] = None) -> dict:
        """
        Serialize subject to JSON-compatible dict.

        Args:
            tick: Current tick; when given, adds 'status_age'

        Returns:
            Dict with all subject fields
        """
        data = {
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'status': self.status.value,
            'event_time': self.event_time,
            'change_time': self.change_time,
            'destination': self.destination.tolist() if self.destination is not None else None,
            'return_time': self.return_time
        }
        if tick is not None:
            data['status_age'] = self.status_age(tick)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Subject':
        """
        Deserialize subject from dict.

        Args:
            data: Dict with subject fields

        Returns:
            Subject instance
        """
        return cls(
            position=np.array(data['position'], dtype=np.float64),
            velocity=np.array(data['velocity'], dtype=np.float64),
            status=HealthStatus(data.get('status', HealthStatus.SUSCEPTIBLE.value)),
            event_time=data.get('event_time', 0),
            change_time=data.get('change_time', NO_TIME),
            destination=data.get('destination'),
            return_time=data.get('return_time')
        )

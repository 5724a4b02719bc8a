"""
Population health statistics.

Per-tick census of subjects in each HealthStatus, peak infection tracking
and eradication detection.
"""

import numpy as np
from typing import Iterable, List, Tuple

from .health import HealthStatus
from .subject import Subject
from .constants import NO_TIME


def count_statuses(subjects: Iterable[Subject]) -> Tuple[int, int, int]:
    """
    Count subjects per health status.

    Returns:
        (susceptible, infected, removed)
    """
    counts = [0] * len(HealthStatus)
    for subject in subjects:
        counts[subject.status.index] += 1
    return tuple(counts)


class HealthStatistics:
    """
    Append-only time series of health counts.

    eradication_tick is set on the first recorded tick with zero infected
    and never changes afterwards.
    """

    def __init__(self):
        self._rows: List[Tuple[int, int, int]] = []
        self._ticks: List[int] = []
        self.max_infected: int = 0
        self.eradication_tick: int = NO_TIME

    @property
    def is_eradicated(self) -> bool:
        return self.eradication_tick != NO_TIME

    def __len__(self) -> int:
        return len(self._rows)

    def reset(self):
        """Clear all recorded data (used on reinitialize)"""
        self._rows = []
        self._ticks = []
        self.max_infected = 0
        self.eradication_tick = NO_TIME

    def record(self, subjects: Iterable[Subject], tick: int) -> Tuple[int, int, int]:
        """
        Record one census row.

        Args:
            subjects: Current population
            tick: Tick being recorded

        Returns:
            The recorded (susceptible, infected, removed) row
        """
        row = count_statuses(subjects)
        self._rows.append(row)
        self._ticks.append(tick)

        infected = row[HealthStatus.INFECTED.index]
        if infected > self.max_infected:
            self.max_infected = infected
        if infected == 0 and not self.is_eradicated:
            self.eradication_tick = tick

        return row

    def latest(self) -> Tuple[int, int, int]:
        """Most recent row, or zeros if nothing recorded yet"""
        if not self._rows:
            return (0, 0, 0)
        return self._rows[-1]

    def as_array(self) -> np.ndarray:
        """
        Copy of the time series.

        Returns:
            (T, 3) int64 array, columns ordered as HealthStatus
        """
        if not self._rows:
            return np.empty((0, len(HealthStatus)), dtype=np.int64)
        return np.array(self._rows, dtype=np.int64)

    def ticks(self) -> np.ndarray:
        """(T,) int64 array of the tick each row was recorded at"""
        return np.array(self._ticks, dtype=np.int64)

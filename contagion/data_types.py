"""
Data types mirroring the YAML field configuration.

These dataclasses are populated by loader.py from YAML files or built
directly in code. Validation lives in loader.validate_config().
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional

import numpy as np

from .constants import (
    DEFAULT_SUBJECT_COUNT,
    DEFAULT_SUBJECT_MASS,
    DEFAULT_FRICTION_FACTOR,
    DEFAULT_LO_BOUND,
    DEFAULT_HI_BOUND,
    DEFAULT_ODDS_OF_DESTINATION,
    DEFAULT_INITIAL_SICK,
    DEFAULT_INFECTION_RADIUS,
    DEFAULT_ODDS_OF_INFECTION,
    DEFAULT_MIN_INFECTION_TIME,
    DEFAULT_MAX_INFECTION_TIME,
    DEFAULT_TIME_SCALE,
    DEFAULT_MIN_STAY_TIME,
    DEFAULT_MAX_STAY_TIME,
)


def _as_list(value):
    """Tuples and numpy arrays become plain lists, numpy scalars plain numbers"""
    if isinstance(value, (np.ndarray, np.generic)):
        return value.tolist()
    if isinstance(value, tuple):
        return list(value)
    return value


# ============================================================================
# Field Configuration
# ============================================================================

@dataclass
class FieldConfig:
    """
    Complete parameter set for a SimulationField.

    Times (infection, stay) are in ticks; infection times are multiplied by
    time_scale when sampled. destination=None means the field centre.
    """
    subject_count: int = DEFAULT_SUBJECT_COUNT
    subject_mass: float = DEFAULT_SUBJECT_MASS
    friction_factor: float = DEFAULT_FRICTION_FACTOR
    lo_bound: List[float] = field(default_factory=lambda: list(DEFAULT_LO_BOUND))
    hi_bound: List[float] = field(default_factory=lambda: list(DEFAULT_HI_BOUND))
    destination: Optional[List[float]] = None
    odds_of_destination: float = DEFAULT_ODDS_OF_DESTINATION
    initial_sick: int = DEFAULT_INITIAL_SICK
    infection_radius: float = DEFAULT_INFECTION_RADIUS
    odds_of_infection: float = DEFAULT_ODDS_OF_INFECTION
    min_infection_time: int = DEFAULT_MIN_INFECTION_TIME
    max_infection_time: int = DEFAULT_MAX_INFECTION_TIME
    time_scale: int = DEFAULT_TIME_SCALE
    min_stay_time: int = DEFAULT_MIN_STAY_TIME
    max_stay_time: int = DEFAULT_MAX_STAY_TIME
    seed: Optional[int] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def resolved_destination(self) -> np.ndarray:
        """Destination as an array, defaulting to the centre of the field"""
        if self.destination is not None:
            return np.array(self.destination, dtype=np.float64)
        lo = np.array(self.lo_bound, dtype=np.float64)
        hi = np.array(self.hi_bound, dtype=np.float64)
        return 0.5 * (lo + hi)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict (the YAML layout)"""
        return {f.name: _as_list(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> 'FieldConfig':
        """
        Build config from a dict, keeping defaults for missing keys.

        Unknown keys raise TypeError (loader.py reports them as ConfigError).
        """
        return cls(**data)

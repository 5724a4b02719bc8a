"""
Contagion simulation kernel.

Main simulation class that owns the subject population, the field
parameters and the engine RNG, and advances the epidemic one tick at a time.
"""

import copy
import dataclasses
import threading
import time
import numpy as np
from typing import Callable, List, Optional

from .subject import Subject
from .health import HealthStatus
from .data_types import FieldConfig
from .loader import ConfigError, validate_config
from .rng import make_generator, random_position, random_vector, uniform_int, bernoulli
from .stats import HealthStatistics, count_statuses
from .transmission import simulate_transmission
from .constants import (
    SUBJECT_INITIAL_MAX_VELOCITY,
    MAX_RANDOM_FORCE,
    DESTINATION_FORCE_FACTOR,
    TICK_TIME_WINDOW,
)


# Changing any of these rebuilds the population immediately
REINIT_FIELDS = frozenset({'subject_count', 'initial_sick', 'infection_radius', 'seed'})

Listener = Callable[['SimulationField'], None]


class SimulationField:
    """
    Main simulation class for the contagion field.

    Manages subject lifecycle, tick orchestration and health statistics.

    Thread safety: one re-entrant lock guards advance(), initialize(),
    configuration changes and snapshot reads. Listeners are called with the
    lock held, so they may query the field but must not block on another
    thread that needs it.
    """

    def __init__(
        self,
        config: Optional[FieldConfig] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize field and spawn the first population.

        Args:
            config: Field parameters (defaults when None)
            rng: Injected RNG; when None one is created from config.seed
        """
        config = config if config is not None else FieldConfig()
        validate_config(config)

        self._lock = threading.RLock()
        self._config: FieldConfig = copy.deepcopy(config)
        self._rng: np.random.Generator = rng if rng is not None else make_generator(config.seed)

        # Cached parameter arrays (refreshed on every config change)
        self._lo_bound: np.ndarray = np.empty(2, dtype=np.float64)
        self._hi_bound: np.ndarray = np.empty(2, dtype=np.float64)
        self._destination: np.ndarray = np.empty(2, dtype=np.float64)
        self._refresh_parameter_arrays()

        # Listener sets are owned by this instance
        self._tick_listeners: List[Listener] = []
        self._config_listeners: List[Listener] = []

        # Simulation state
        self.subjects: List[Subject] = []
        self._tick: int = 0
        self._initialized: bool = False
        self._paused: bool = False
        self._restart_requested: bool = False
        self._destination_enabled: bool = False
        self._stats = HealthStatistics()

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

        # Transmission telemetry (latest tick)
        self._telemetry: dict = {'contacts': 0, 'new_infections': 0, 'new_removals': 0}

        with self._lock:
            self._initialize_locked()

        print(f"[OK] Field initialized: {len(self.subjects)} subjects, "
              f"{self._config.initial_sick} sick, radius={self._config.infection_radius}, "
              f"seed={self._config.seed}")

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def _refresh_parameter_arrays(self):
        self._lo_bound = np.array(self._config.lo_bound, dtype=np.float64)
        self._hi_bound = np.array(self._config.hi_bound, dtype=np.float64)
        self._destination = self._config.resolved_destination()

    def _random_duration(self) -> int:
        """Infection duration in ticks: time_scale * U[min, max)"""
        cfg = self._config
        return cfg.time_scale * uniform_int(self._rng, cfg.min_infection_time, cfg.max_infection_time)

    def _create_random_subject(self, index: int) -> Subject:
        return Subject(
            position=random_position(self._rng, self._lo_bound, self._hi_bound),
            velocity=random_vector(self._rng, SUBJECT_INITIAL_MAX_VELOCITY),
            event_time=index
        )

    def _initialize_locked(self):
        """
        Rebuild population and reset run state. Caller holds the lock.

        Subject i is stamped with event_time=i so animation phases are
        staggered; the first initial_sick subjects start INFECTED at tick i.
        The run then starts at tick subject_count + 1.
        """
        subjects = []
        for i in range(self._config.subject_count):
            subject = self._create_random_subject(i)
            if i < self._config.initial_sick:
                subject.update_health(HealthStatus.INFECTED, i, self._random_duration())
            subjects.append(subject)

        self.subjects = subjects
        self._tick = len(subjects) + 1
        self._stats.reset()
        self._telemetry = {'contacts': 0, 'new_infections': 0, 'new_removals': 0}
        self._initialized = True

    def initialize(self):
        """(Re)create all subjects and reset tick, statistics and eradication"""
        with self._lock:
            self._initialize_locked()
            self._publish_config_event()

    def request_restart(self):
        """Reinitialize at the start of the next advance() call"""
        with self._lock:
            self._restart_requested = True

    def reset_defaults(self):
        """Restore default parameters and reinitialize (RNG stream is kept)"""
        with self._lock:
            self._config = FieldConfig()
            self._refresh_parameter_arrays()
            self._initialize_locked()
            self._publish_config_event()

    # ========================================================================
    # Configuration
    # ========================================================================

    def configure(self, **changes) -> FieldConfig:
        """
        Update one or more parameters.

        Validate-before-apply: on error nothing changes. Changing a field in
        REINIT_FIELDS rebuilds the population; other fields take effect on
        the next tick.

        Args:
            **changes: FieldConfig field names and new values

        Returns:
            The new configuration

        Raises:
            ConfigError: Unknown field or invalid value
        """
        unknown = set(changes) - set(FieldConfig.field_names())
        if unknown:
            raise ConfigError(f"Unknown field parameter(s): {', '.join(sorted(unknown))}")

        with self._lock:
            new_config = FieldConfig.from_dict(dataclasses.replace(self._config, **changes).to_dict())
            validate_config(new_config)

            self._config = copy.deepcopy(new_config)
            self._refresh_parameter_arrays()

            if 'seed' in changes:
                self._rng = make_generator(new_config.seed)
            if REINIT_FIELDS.intersection(changes):
                self._initialize_locked()

            self._publish_config_event()
            return copy.deepcopy(self._config)

    def set_subject_count(self, subject_count: int):
        self.configure(subject_count=subject_count)

    def set_bounds(self, lo_bound, hi_bound):
        """Resize the field; subjects outside are reflected back on the next tick"""
        self.configure(lo_bound=list(lo_bound), hi_bound=list(hi_bound))

    def set_destination(self, destination):
        self.configure(destination=list(destination) if destination is not None else None)

    def set_paused(self, paused: bool):
        with self._lock:
            self._paused = bool(paused)

    def set_destination_enabled(self, enabled: bool):
        with self._lock:
            self._destination_enabled = bool(enabled)

    # ========================================================================
    # Listeners
    # ========================================================================

    def add_tick_listener(self, listener: Listener):
        """Call listener(field) after every completed tick"""
        self._tick_listeners.append(listener)

    def remove_tick_listener(self, listener: Listener):
        self._tick_listeners.remove(listener)

    def add_config_listener(self, listener: Listener):
        """Call listener(field) after every parameter change or reinitialize"""
        self._config_listeners.append(listener)

    def remove_config_listener(self, listener: Listener):
        self._config_listeners.remove(listener)

    def _publish_tick_event(self):
        for listener in list(self._tick_listeners):
            listener(self)

    def _publish_config_event(self):
        for listener in list(self._config_listeners):
            listener(self)

    # ========================================================================
    # Tick
    # ========================================================================

    def advance(self) -> bool:
        """
        Advance simulation by one tick.

        Order:
        1. Pending restart -> reinitialize (and unpause)
        2. Paused -> return without touching state
        3. Destination assignment (if enabled)
        4. Subject physics and recovery
        5. Transmission pass
        6. Statistics (until eradication)
        7. Tick listeners, then tick += 1

        The tick counter still advances if a listener raises; the listener's
        exception then propagates to the caller.

        Returns:
            True if a tick was simulated, False if paused
        """
        with self._lock:
            if self._restart_requested:
                self._initialize_locked()
                self._restart_requested = False
                self._paused = False
                self._publish_config_event()

            if self._paused:
                return False

            start_time = time.perf_counter()

            if self._destination_enabled:
                self._assign_destination()

            removals = self._update_subjects()

            cfg = self._config
            result = simulate_transmission(
                self.subjects,
                infection_radius=cfg.infection_radius,
                probability=cfg.odds_of_infection / cfg.time_scale,
                rng=self._rng,
                tick=self._tick,
                duration_fn=self._random_duration
            )

            if not self._stats.is_eradicated:
                self._stats.record(self.subjects, self._tick)

            self._telemetry = {
                'contacts': result['contacts'],
                'new_infections': len(result['new_infections']),
                'new_removals': removals
            }
            self._record_tick_time(time.perf_counter() - start_time)

            try:
                self._publish_tick_event()
            finally:
                self._tick += 1

            return True

    def _assign_destination(self):
        """With probability odds_of_destination, send one random subject travelling"""
        cfg = self._config
        if not self.subjects or not bernoulli(self._rng, cfg.odds_of_destination):
            return

        row = int(self._rng.integers(len(self.subjects)))
        return_time = self._tick + uniform_int(self._rng, cfg.min_stay_time, cfg.max_stay_time)
        self.subjects[row].assign_destination(self._destination, return_time)

    def _update_subjects(self) -> int:
        """Move every subject and apply recoveries; returns removal count"""
        cfg = self._config
        removals = 0
        for subject in self.subjects:
            removed = subject.update(
                cfg.subject_mass,
                random_vector(self._rng, MAX_RANDOM_FORCE),
                self._lo_bound,
                self._hi_bound,
                DESTINATION_FORCE_FACTOR,
                self._tick,
                cfg.friction_factor
            )
            if removed:
                removals += 1
        return removals

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def config(self) -> FieldConfig:
        """Copy of the current parameters"""
        with self._lock:
            return copy.deepcopy(self._config)

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def restart_requested(self) -> bool:
        return self._restart_requested

    @property
    def destination_enabled(self) -> bool:
        return self._destination_enabled

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def max_infected(self) -> int:
        return self._stats.max_infected

    @property
    def eradication_tick(self) -> int:
        """First tick with zero infected, or -1 if not yet eradicated"""
        return self._stats.eradication_tick

    @property
    def is_eradicated(self) -> bool:
        return self._stats.is_eradicated

    def census(self) -> tuple:
        """Current (susceptible, infected, removed) counts"""
        with self._lock:
            return count_statuses(self.subjects)

    def get_time_series(self) -> np.ndarray:
        """(T, 3) copy of per-tick (susceptible, infected, removed) counts"""
        with self._lock:
            return self._stats.as_array()

    def get_positions(self) -> np.ndarray:
        """(N, 2) copy of subject positions (renderer fast path)"""
        with self._lock:
            if not self.subjects:
                return np.empty((0, 2), dtype=np.float64)
            return np.array([s.position for s in self.subjects], dtype=np.float64)

    def get_statuses(self) -> List[HealthStatus]:
        with self._lock:
            return [s.status for s in self.subjects]

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self._tick,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self._tick,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete field state snapshot (copies only).

        Returns:
            Dict with tick, subjects (incl. status_age), census, statistics, timing
        """
        with self._lock:
            susceptible, infected, removed = count_statuses(self.subjects)
            return {
                'tick': self._tick,
                'subject_count': len(self.subjects),
                'subjects': [s.to_dict(self._tick) for s in self.subjects],
                'census': {
                    'susceptible': susceptible,
                    'infected': infected,
                    'removed': removed
                },
                'max_infected': self._stats.max_infected,
                'eradication_tick': self._stats.eradication_tick,
                'telemetry': dict(self._telemetry),
                'timing': self.get_tick_stats()
            }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        susceptible, infected, removed = self.census()
        print(f"Tick {stats['tick_count']:6d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"S/I/R: {susceptible}/{infected}/{removed} | "
              f"Peak: {self._stats.max_infected} | "
              f"Contacts: {self._telemetry['contacts']}")

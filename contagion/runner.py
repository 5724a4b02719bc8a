"""
SimulationRunner: fixed-pacing stepping loop for a SimulationField.

Runs one daemon thread ("field-tick") that calls field.advance() and then
waits STEP_DELAY_SECONDS. Pause and restart are field flags, so a UI can
toggle them while the runner keeps pacing. The loop stops on stop(), after
max_ticks simulated ticks, or when advance() raises; in the last case the
exception is kept and re-raised from stop()/join().
"""

from __future__ import annotations

import threading
from typing import Optional

from .simulation import SimulationField
from .constants import STEP_DELAY_SECONDS, TICK_SUMMARY_INTERVAL


class SimulationRunner:
    """Drives a SimulationField at a fixed pacing interval."""

    def __init__(
        self,
        field: SimulationField,
        delay: float = STEP_DELAY_SECONDS,
        max_ticks: Optional[int] = None,
        summary_interval: Optional[int] = None
    ) -> None:
        """
        Args:
            field: Field to drive
            delay: Seconds to wait between advance() calls
            max_ticks: Stop after this many simulated (unpaused) ticks
            summary_interval: Print a tick summary every N simulated ticks
        """
        self.field = field
        self.delay = delay
        self.max_ticks = max_ticks
        self.summary_interval = summary_interval
        self.ticks_run: int = 0
        self.error: Optional[BaseException] = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -- Lifecycle ----------------------------------------------------------

    def start(self, restart: bool = True) -> None:
        """
        Start the stepping thread.

        Args:
            restart: Request a field restart before the first tick
        """
        if self.running:
            return
        if restart:
            self.field.request_restart()
        self.error = None
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._tick_loop, name="field-tick", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loop and wait for the thread; re-raises a loop failure"""
        self._stop_event.set()
        self.join(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the loop to finish; re-raises a loop failure"""
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if not self._thread.is_alive():
                self._thread = None
        if self.error is not None:
            error, self.error = self.error, None
            raise error

    # -- Tick loop ----------------------------------------------------------

    def _tick_loop(self) -> None:
        interval = self.summary_interval or TICK_SUMMARY_INTERVAL
        while not self._stop_event.is_set():
            try:
                advanced = self.field.advance()
            except Exception as e:
                print(f"[FAIL] Tick loop stopped at tick {self.field.tick}: {e}")
                self.error = e
                break

            if advanced:
                self.ticks_run += 1
                if self.summary_interval and self.ticks_run % interval == 0:
                    self.field.print_tick_summary()
                if self.max_ticks is not None and self.ticks_run >= self.max_ticks:
                    break

            self._stop_event.wait(self.delay)

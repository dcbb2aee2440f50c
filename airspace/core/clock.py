import logging
import threading

from .simulator import Simulator
from .state import SwarmState

logger = logging.getLogger(__name__)


class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    def clear(self):
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; returns True if cancelled meanwhile."""
        return self._event.wait(timeout)


class IntervalTickSource:
    """Wall-clock cadence between ticks."""

    def __init__(self, interval: float = 0.1):
        self.interval = interval

    def wait(self, token: CancellationToken) -> bool:
        return not token.wait(self.interval)


class ImmediateTickSource:
    """No delay between ticks; for tests and batch runs."""

    def wait(self, token: CancellationToken) -> bool:
        return not token.cancelled


class SimulationClock:
    """
    Drives a Simulator: start/pause/reset plus a cooperative tick loop.

    Ticks never overlap: `run` only waits on the tick source between complete
    ticks, and pausing just stops the next one from being scheduled. Ticks and
    resets hold the same lock, so a reset requested from another thread lands
    between ticks.
    """

    def __init__(self, simulator: Simulator, tick_source=None):
        self.simulator = simulator
        self.tick_source = tick_source or IntervalTickSource(simulator.config.tick_interval)
        self.token = CancellationToken()
        self.token.cancel()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return not self.token.cancelled

    def start(self):
        if self.is_running:
            return
        self.token.clear()
        self.simulator.set_running(True)
        logger.info("Simulation started at tick %d", self.simulator.tick_count)

    def pause(self):
        if not self.is_running:
            return
        self.token.cancel()
        self.simulator.set_running(False)
        logger.info("Simulation paused at tick %d", self.simulator.tick_count)

    def reset(self, config=None) -> SwarmState:
        """Reinitialise the simulation; a running clock keeps running."""
        with self._lock:
            self.simulator.reset(config)
            if isinstance(self.tick_source, IntervalTickSource):
                self.tick_source.interval = self.simulator.config.tick_interval
            return self.simulator.set_running(self.is_running)

    def step(self) -> SwarmState | None:
        """Run exactly one tick if the clock is running."""
        if not self.is_running:
            return None
        with self._lock:
            return self.simulator.tick()

    def snapshot(self) -> SwarmState:
        return self.simulator.snapshot()

    def run(self, max_ticks: int | None = None, on_tick=None) -> int:
        """
        Tick until paused or `max_ticks` is reached. `on_tick` receives each
        published snapshot. Returns the number of ticks run.
        """
        self.start()
        count = 0
        try:
            while self.is_running and (max_ticks is None or count < max_ticks):
                with self._lock:
                    state = self.simulator.tick()
                count += 1
                if on_tick is not None:
                    on_tick(state)
                if max_ticks is not None and count >= max_ticks:
                    break
                if not self.tick_source.wait(self.token):
                    break
        finally:
            self.pause()
        return count

"""Fixed-timestep driver and edge-triggered input for the simulation."""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .engine import TickEngine
from .grid import Grid
from .state import TickReport

SIM_DT = 1.0 / 60.0


@dataclass(frozen=True)
class InputState:
    """Snapshot of the control keys at one point in time."""
    quit: bool = False
    reset: bool = False


def pressed(prev: InputState, now: InputState, key: str) -> bool:
    """True only when a key went from released to pressed."""
    return getattr(now, key) and not getattr(prev, key)


class FixedTimestepDriver:
    """
    Runs the tick engine in fixed logical increments of simulated time.

    Real elapsed time is accumulated and zero or more ticks are run per
    frame to catch up. Quit and reset are edge-triggered: they fire once
    on press, not while held.
    """

    def __init__(self, grid: Grid, engine: TickEngine,
                 rng: np.random.Generator, dt: float = SIM_DT):
        if dt <= 0:
            raise ValueError(f"Timestep must be positive, got {dt}")
        self.grid = grid
        self.engine = engine
        self.rng = rng
        self.dt = dt
        self.accumulator = 0.0
        self.current_step = 0
        self.quit_requested = False
        self._prev_input = InputState()

    def advance(self, elapsed: float,
                inputs: Optional[InputState] = None) -> int:
        """Accumulate real time and run as many ticks as it covers."""
        if elapsed < 0:
            raise ValueError(f"Elapsed time cannot be negative, got {elapsed}")
        now = inputs if inputs is not None else self._prev_input
        self.accumulator += elapsed

        ticks = 0
        while self.accumulator >= self.dt and not self.quit_requested:
            self._handle_input(now)
            if self.quit_requested:
                break
            self.tick()
            ticks += 1
            self.accumulator -= self.dt
        return ticks

    def _handle_input(self, now: InputState) -> None:
        if pressed(self._prev_input, now, "quit"):
            self.quit_requested = True
        if pressed(self._prev_input, now, "reset"):
            self.grid.clear()
        self._prev_input = now

    def tick(self) -> TickReport:
        """Run a single tick of the engine."""
        self.current_step += 1
        return self.engine.step(self.grid, self.rng)

    def run_ticks(self, count: int) -> List[TickReport]:
        """Run exactly `count` ticks, ignoring real time."""
        return [self.tick() for _ in range(count)]

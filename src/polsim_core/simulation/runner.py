# src/polsim_core/simulation/runner.py
"""
Defines the `SimulationRunner`, the clock-and-pacer loop driving the simulation.

The mode is fixed for the run by `state.serial_on`:

- **Unpaced (batch):** every full step is integrated immediately and followed by one
  output row, with the polarization rate derived locally.
- **Paced (hardware-linked):** pending controller commands are drained continuously,
  and a full step is integrated only once `delay` wall-clock seconds have passed
  since the previous one. The controller supplies the polarization rate, and output
  rows are written whenever it completes a data cycle (see `ControllerLink`).
"""
import logging
from typing import Optional

from ..dynamics import PolarizationEngine, anneal
from ..output import DataWriter
from ..protocol import ControllerLink
from ..state import SimulationState
from .clock import Clock, MonotonicClock

logger = logging.getLogger(__name__)


class SimulationRunner:
    def __init__(
        self,
        state: SimulationState,
        engine: PolarizationEngine,
        writer: DataWriter,
        delay: float = 1.0,
        link: Optional[ControllerLink] = None,
        clock: Optional[Clock] = None,
    ):
        if state.serial_on and link is None:
            raise ValueError("A paced (serial) run requires a ControllerLink.")
        self.state = state
        self.engine = engine
        self.writer = writer
        self.delay = delay
        self.link = link
        self.clock: Clock = clock if clock is not None else MonotonicClock()

    @property
    def paced(self) -> bool:
        return self.state.serial_on

    @property
    def delta_t(self) -> float:
        return self.engine.delta_t

    def emit_row(self, state: Optional[SimulationState] = None):
        self.writer.write_row(self.state if state is None else state)

    def run_until(self, target_time: float):
        """Advances the simulation in full steps while `time < target_time`."""
        logger.info(f"Running until time {target_time:f}")
        if self.paced:
            self._run_paced(target_time)
        else:
            self._run_unpaced(target_time)

    def _run_unpaced(self, target_time: float):
        while self.state.time < target_time:
            self.engine.advance(self.state, local_rate=True)
            self.emit_row()

    def _run_paced(self, target_time: float):
        last_update = self.clock.now()
        while self.state.time < target_time:
            self.link.service_pending()
            now = self.clock.now()
            if now - last_update >= self.delay:
                self.engine.advance(self.state, local_rate=False)
                logger.info(f"Simulation time: {self.state.time:f}")
                last_update = now

    def anneal(self, duration: float, temperature: float):
        """Runs an anneal; rows are only written here when no controller supplies them."""
        on_step = None if self.paced else self.emit_row
        anneal(self.state, duration, temperature, self.delta_t, on_step=on_step)

# src/polsim_core/dynamics/beam.py
import logging
from typing import Callable, Optional

from ..constants import TRIP_STEADY_STATE_BOOST, TRIP_RATE_BOOST
from ..state import SimulationState

logger = logging.getLogger(__name__)


class BeamController:
    """
    Beam on/off switching and beam-trip sequencing.

    A trip is half beam-off and half beam-on. Polarization is observed to recover
    faster right after the beam drops out, so the beam-off half runs with a raised
    steady state and a faster growth rate.
    """

    def __init__(self, state: SimulationState, nominal_dose_rate: float):
        self.state = state
        self.nominal_dose_rate = nominal_dose_rate

    def beam_on(self, rate: Optional[float] = None):
        self.state.dose_rate = self.nominal_dose_rate if rate is None else rate
        logger.info(f"Beam on (dose rate {self.state.dose_rate:g})")

    def beam_off(self):
        self.state.dose_rate = 0.0
        logger.info("Beam off")

    def trip(self, duration: float, run_until: Callable[[float], None]):
        """
        Simulates a beam trip lasting `duration` seconds.

        Args:
            duration: Total trip length; the first half is beam-off recovery and the
                      second half resumes normal running.
            run_until: Advances the simulation to an absolute time.
        """
        state = self.state
        logger.info(f"Simulating beam trip: {duration:f} s")

        self.beam_off()
        state.tripping = True
        saved_steady_state = state.steady_state
        state.steady_state = min(state.steady_state * TRIP_STEADY_STATE_BOOST, state.max_steady_state)
        state.rate_scale *= TRIP_RATE_BOOST

        run_until(state.time + duration / 2)

        self.beam_on()
        state.steady_state = saved_steady_state
        state.rate_scale /= TRIP_RATE_BOOST

        run_until(state.time + duration / 2)
        state.tripping = False
        logger.info(f"Beam trip finished at t={state.time:f} s")

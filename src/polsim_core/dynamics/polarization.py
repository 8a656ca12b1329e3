# src/polsim_core/dynamics/polarization.py
"""
Polarization dynamics.

Polarization follows exponential growth or decay, y = A -/+ C*exp(-k*t), where A is
the value being approached, C the distance from it and k a rate constant set by how
far the microwave frequency is from the ideal one for the current dose and field.
Near the ideal frequency the target polarization (sign set by the frequency regime)
is approached; away from it the polarization relaxes toward zero.
"""
import logging
import math
from typing import Optional

import numpy as np

from .. import constants as c
from ..state import SimulationState
from .dose import decay_steady_state

logger = logging.getLogger(__name__)


def optimal_frequency_positive(dose: float, field: float = c.REFERENCE_FIELD_T) -> float:
    """Ideal frequency (GHz) for positive polarization, fitted to SANE data."""
    return (c.POSITIVE_CURVE_A + c.POSITIVE_CURVE_C * math.exp(-c.POSITIVE_CURVE_K * dose)) * c.REFERENCE_FIELD_T / field


def optimal_frequency_negative(dose: float, field: float = c.REFERENCE_FIELD_T) -> float:
    """Ideal frequency (GHz) for negative polarization, fitted to SANE data."""
    return (c.NEGATIVE_CURVE_A - c.NEGATIVE_CURVE_C * math.exp(-c.NEGATIVE_CURVE_K * dose)) * c.REFERENCE_FIELD_T / field


def deviation_increasing(freq_diff: float) -> float:
    """Lorentzian response peaked at zero detuning: 0.95 at d=0, -0.05 far away."""
    return 1.0 / (1.0 + c.LORENTZIAN_WIDTH * freq_diff * freq_diff) - c.LORENTZIAN_OFFSET


def deviation_decreasing(freq_diff: float) -> float:
    """Lorentzian response peaked at the receding-branch offset."""
    shifted = freq_diff - c.DECREASING_PEAK_GHZ
    return 1.0 / (1.0 + c.LORENTZIAN_WIDTH * shifted * shifted) - c.LORENTZIAN_OFFSET


def target_polarization(steady_state: float, response: float) -> float:
    """Steady state adjusted for how well the frequency is tuned."""
    return steady_state - c.TARGET_PENALTY * (c.PEAK_RESPONSE - abs(response)) / c.PEAK_RESPONSE


def is_negative_regime(frequency: float) -> bool:
    return frequency > c.CROSSOVER_FREQUENCY_GHZ


def ideal_frequency(state: SimulationState) -> float:
    if is_negative_regime(state.frequency):
        return optimal_frequency_negative(state.dose, state.field)
    return optimal_frequency_positive(state.dose, state.field)


class PolarizationEngine:
    """
    Advances polarization, steady state and dose through time.

    One caller-visible step of `delta_t` seconds is integrated as `substeps` equal
    sub-steps to keep the exponential update stable.
    """

    def __init__(
        self,
        delta_t: float = 1.0,
        substeps: int = 2000,
        base_randomness: int = 500,
        rng: Optional[np.random.Generator] = None,
    ):
        self.delta_t = delta_t
        self.substeps = substeps
        self.base_randomness = base_randomness
        self.rng = rng if rng is not None else np.random.default_rng()

    def integrate(self, state: SimulationState, dt: float) -> None:
        """Integrates one sub-step of `dt` seconds."""
        decay_steady_state(state, dt)

        sign = -1.0 if is_negative_regime(state.frequency) else 1.0
        ideal = ideal_frequency(state)
        if state.follow_frequency:
            state.frequency = ideal

        k_max = c.K_MAX * state.rate_scale
        deviation = ideal - state.frequency
        within_window = 1.0 - abs(deviation) / c.FREQUENCY_TOLERANCE_GHZ >= c.GROWTH_WINDOW_FRACTION

        if within_window:
            response = deviation_increasing(deviation)
            state.k_val = k_max * response
            target = target_polarization(state.steady_state, response)
            # Work on the magnitude in the regime's direction.
            magnitude = sign * state.polarization
            magnitude = target - (target - magnitude) * math.exp(-state.k_val * dt)
            state.polarization = sign * magnitude
        else:
            state.k_val = min(k_max * (1.0 - deviation_decreasing(deviation)), k_max)
            state.polarization *= math.exp(-state.k_val * dt)

        state.dose += state.dose_rate * dt

    def advance(self, state: SimulationState, local_rate: bool = True) -> None:
        """
        Advances the simulation by one full time step.

        Args:
            state: The simulation state to advance.
            local_rate: Whether to derive the polarization rate from this step. When
                        hardware-linked, the controller supplies the rate instead.
        """
        previous = state.polarization
        state.time += self.delta_t
        dt = self.delta_t / self.substeps
        for _ in range(self.substeps):
            self.integrate(state, dt)

        if local_rate:
            state.polarization_rate = (state.polarization - previous) / self.delta_t

        if state.randomness_on:
            self.apply_fluctuation(state)

    def apply_fluctuation(self, state: SimulationState) -> bool:
        """
        Applies one thermal fluctuation to the polarization.

        The relative size is drawn in parts per million, with a wider spread while
        the beam deposits dose. A fluctuation that would push the polarization past
        the ceiling (widened by the same fraction) is discarded.

        Returns:
            True if the fluctuation was applied.
        """
        spread = self.base_randomness + int(c.FLUCTUATION_SCALE * state.dose_rate)
        percent = int(self.rng.integers(0, spread)) / c.FLUCTUATION_SCALE
        if self.rng.integers(0, 2) == 0:
            candidate = state.polarization + state.polarization * percent
        else:
            candidate = state.polarization - state.polarization * percent
        if abs(candidate) < (1.0 + percent) * state.max_steady_state:
            state.polarization = candidate
            return True
        return False

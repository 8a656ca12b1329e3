# src/polsim_core/dynamics/dose.py
"""
Radiation dose and anneal model.

Radiation damage lowers the achievable steady-state polarization exponentially in
the dose received since the last anneal, with a critical dose that grows as the
material accumulates damage (Proceedings of the 4th International Workshop on
Polarized Target Materials and Techniques, p. 26). An anneal restores the
temperature-defined ceiling.
"""
import logging
import math
from typing import Callable, Optional

from ..constants import (
    CRITICAL_DOSE_THRESHOLDS,
    CRITICAL_DOSES,
    TEMPERATURE_COEFFICIENT,
    REFERENCE_TEMPERATURE_K,
    MAX_POLARIZATION,
)
from ..state import SimulationState

logger = logging.getLogger(__name__)


def critical_dose(state: SimulationState) -> float:
    """Critical dose for the tier reached by the dose since the last anneal."""
    dose_since_anneal = state.dose - state.last_anneal_dose
    for threshold, crit in zip(reversed(CRITICAL_DOSE_THRESHOLDS[1:]), reversed(CRITICAL_DOSES[1:])):
        if dose_since_anneal > threshold:
            return crit
    return CRITICAL_DOSES[0]


def decay_steady_state(state: SimulationState, delta_t: float) -> None:
    """Lowers the steady state for the dose deposited over `delta_t` seconds."""
    delta_dose = delta_t * state.dose_rate
    state.steady_state *= math.exp(-delta_dose / critical_dose(state))


def steady_state_ceiling(base_steady_state: float, temperature: float) -> float:
    """95% at 1 K and 72% at 1.62 K for the default base ("Polarization Studies with
    Radiation Doped Ammonia at 5T and 1K", 1990, fig. 14)."""
    ceiling = base_steady_state * math.exp(-TEMPERATURE_COEFFICIENT * (temperature - REFERENCE_TEMPERATURE_K))
    return min(ceiling, MAX_POLARIZATION)


def reset_steady_state(state: SimulationState, temperature: Optional[float] = None) -> float:
    """
    Recomputes the temperature-defined ceiling and restores the steady state to it.

    Args:
        state: The simulation state; `temperature` defaults to `state.temperature`.
        temperature: Temperature in K to evaluate the ceiling at.

    Returns:
        The new steady state.
    """
    if temperature is None:
        temperature = state.temperature
    state.max_steady_state = steady_state_ceiling(state.base_steady_state, temperature)
    state.steady_state = state.max_steady_state
    logger.debug(f"Steady state reset to {state.steady_state:f} at {temperature:f} K")
    return state.steady_state


def anneal(
    state: SimulationState,
    duration: float,
    temperature: float,
    delta_t: float,
    on_step: Optional[Callable[[SimulationState], None]] = None,
) -> None:
    """
    Simulates a thermal anneal of `duration` seconds.

    The target is depolarized while it is warm, so polarization reads zero while the
    clock advances in full steps. `on_step` is called after every step with the
    polarization rate forced to zero; it is omitted when the controller supplies
    the data rows. Afterwards the pre-anneal polarization is restored and the
    radiation-damage bookkeeping starts over from the current dose.
    """
    logger.info(f"Annealing for {duration:f} s at {temperature:f} K")
    end_time = state.time + duration
    saved_polarization = state.polarization
    state.polarization = 0.0

    while state.time < end_time:
        state.time += delta_t
        if on_step is not None:
            state.polarization_rate = 0.0
            on_step(state)

    state.polarization = saved_polarization
    state.last_anneal_dose = state.dose
    state.anneal_count += 1
    reset_steady_state(state)
    logger.info(f"Anneal {state.anneal_count} complete at t={state.time:f} s, dose {state.dose:f}")

# src/polsim_core/state.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .config import SimulationConfig


@dataclass
class SimulationState:
    """
    The single mutable aggregate holding every quantity of one simulation run.

    It is created once from the configuration and passed by reference to every
    component (dynamics engine, beam controller, runner, controller link, scenario
    interpreter). Nothing else owns simulation quantities.

    Units: time in s, frequency in GHz, field in T, temperature in K,
    dose in 10^15 e-/cm^2, polarization as a signed fraction.
    """
    time: float = 0.0
    frequency: float = 140.145
    field: float = 5.0
    temperature: float = 1.0

    polarization: float = 0.0
    polarization_rate: float = 0.0

    # Steady state at 1 K; the temperature-dependent ceiling is derived from it.
    base_steady_state: float = 0.95
    max_steady_state: float = 0.95
    steady_state: float = 0.95
    # Multiplier on K_MAX; raised during the beam-off half of a trip.
    rate_scale: float = 1.0

    dose: float = 0.0
    dose_rate: float = 0.0
    last_anneal_dose: float = 0.0
    anneal_count: int = 0

    k_val: float = 0.0
    direction: Optional[int] = None

    serial_on: bool = False
    randomness_on: bool = False
    follow_frequency: bool = False
    tripping: bool = False
    in_init_block: bool = False
    did_init: bool = False

    @classmethod
    def from_config(cls, config: SimulationConfig) -> SimulationState:
        """Creates the initial state from the configured starting conditions."""
        return cls(
            frequency=config.frequency,
            field=config.field,
            temperature=config.temperature,
            base_steady_state=config.steady_state,
            max_steady_state=config.steady_state,
            steady_state=config.steady_state,
            serial_on=config.serial_enabled,
            randomness_on=config.randomness,
        )

    @property
    def beam_on(self) -> bool:
        return self.dose_rate > 0.0

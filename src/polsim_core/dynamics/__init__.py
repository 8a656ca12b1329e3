# src/polsim_core/dynamics/__init__.py
from .polarization import (
    PolarizationEngine,
    optimal_frequency_positive,
    optimal_frequency_negative,
    deviation_increasing,
    deviation_decreasing,
    target_polarization,
    ideal_frequency,
)
from .dose import critical_dose, decay_steady_state, reset_steady_state, steady_state_ceiling, anneal
from .beam import BeamController

__all__ = [
    # Polarization
    "PolarizationEngine",
    "optimal_frequency_positive",
    "optimal_frequency_negative",
    "deviation_increasing",
    "deviation_decreasing",
    "target_polarization",
    "ideal_frequency",
    # Dose & anneal
    "critical_dose",
    "decay_steady_state",
    "reset_steady_state",
    "steady_state_ceiling",
    "anneal",
    # Beam
    "BeamController",
]

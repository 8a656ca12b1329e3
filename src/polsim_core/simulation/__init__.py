# src/polsim_core/simulation/__init__.py
from .clock import Clock, MonotonicClock
from .runner import SimulationRunner
from .results import RunSummary
from .execution import run_scenario, default_output_path

__all__ = [
    # Pacing
    "Clock",
    "MonotonicClock",
    # Core Classes
    "SimulationRunner",
    "RunSummary",
    # Facade
    "run_scenario",
    "default_output_path",
]

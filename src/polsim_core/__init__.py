# src/polsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.debug("PolSim Core package initialized.")

from .units import ureg, pint, Quantity
from .state import SimulationState
from .config import SimulationConfig, ConfigLoader, load_config
from .dynamics import PolarizationEngine, BeamController
from .protocol import ControllerCodec, ControllerLink, SerialChannel
from .scenario import ScenarioInterpreter, CommandRejection, read_scenario
from .simulation import SimulationRunner, RunSummary, run_scenario
from .errors import PolSimError, SimulationSetupError, SimulationRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # State & configuration
    "SimulationState", "SimulationConfig", "ConfigLoader", "load_config",
    # Dynamics
    "PolarizationEngine", "BeamController",
    # Controller link
    "ControllerCodec", "ControllerLink", "SerialChannel",
    # Scenario
    "ScenarioInterpreter", "CommandRejection", "read_scenario",
    # Simulation
    "SimulationRunner", "RunSummary", "run_scenario",
    # Top-Level Errors (Actionable Diagnostics)
    "PolSimError", "SimulationSetupError", "SimulationRunError",
]

# src/polsim_core/config/__init__.py
from .loader import SimulationConfig, ConfigLoader, load_config
from .exceptions import ConfigParsingError, ConfigSchemaError

__all__ = [
    "SimulationConfig",
    "ConfigLoader",
    "load_config",
    "ConfigParsingError",
    "ConfigSchemaError",
]

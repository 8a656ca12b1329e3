# src/polsim_core/config/loader.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cerberus
import yaml

from ..units import FREQUENCY_UNIT, FIELD_UNIT, TEMPERATURE_UNIT, FRACTION_UNIT, to_magnitude
from .exceptions import ConfigParsingError, ConfigSchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Operational settings of a simulation run.

    The defaults reproduce the original bench setup: 1 s simulated steps paced at
    one per wall-clock second, 2000 integration sub-steps per step, a 9600 baud
    8N1 controller link and a nominal dose rate of 0.0002 x 10^15 e-/cm^2/s.
    """
    serial_enabled: bool = False
    serial_port: str = "/dev/ttyUSB0"
    baudrate: int = 9600

    delta_t: float = 1.0
    delay: float = 1.0
    substeps: int = 2000

    dose_rate: float = 0.0002

    frequency: float = 140.145
    field: float = 5.0
    temperature: float = 1.0
    steady_state: float = 0.95

    randomness: bool = False
    base_randomness: int = 500
    seed: Optional[int] = None

    log_level: str = "INFO"


class ConfigLoader:
    """
    Loads and validates a YAML configuration file into a `SimulationConfig`.
    Sections and keys are all optional; anything not given keeps its default.
    """
    _quantity_rule = {"type": ["string", "number"]}

    _schema = {
        "serial": {"type": "dict", "required": False, "schema": {
            "enabled": {"type": "boolean"},
            "port": {"type": "string", "empty": False},
            "baudrate": {"type": "integer", "min": 1},
        }},
        "timing": {"type": "dict", "required": False, "schema": {
            "delta_t": {"type": "number", "min": 1e-9},
            "delay": {"type": "number", "min": 0},
            "substeps": {"type": "integer", "min": 1},
        }},
        "beam": {"type": "dict", "required": False, "schema": {
            "dose_rate": {"type": "number", "min": 0},
        }},
        "initial": {"type": "dict", "required": False, "schema": {
            "frequency": _quantity_rule,
            "field": _quantity_rule,
            "temperature": _quantity_rule,
            "steady_state": _quantity_rule,
        }},
        "fluctuations": {"type": "dict", "required": False, "schema": {
            "enabled": {"type": "boolean"},
            "base_randomness": {"type": "integer", "min": 1},
            "seed": {"type": "integer", "nullable": True, "min": 0},
        }},
        "logging": {"type": "dict", "required": False, "schema": {
            "level": {"type": "string", "allowed": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
        }},
    }

    # (section, key) -> SimulationConfig field
    _field_map = {
        ("serial", "enabled"): "serial_enabled",
        ("serial", "port"): "serial_port",
        ("serial", "baudrate"): "baudrate",
        ("timing", "delta_t"): "delta_t",
        ("timing", "delay"): "delay",
        ("timing", "substeps"): "substeps",
        ("beam", "dose_rate"): "dose_rate",
        ("fluctuations", "enabled"): "randomness",
        ("fluctuations", "base_randomness"): "base_randomness",
        ("fluctuations", "seed"): "seed",
        ("logging", "level"): "log_level",
    }

    _initial_units = {
        "frequency": FREQUENCY_UNIT,
        "field": FIELD_UNIT,
        "temperature": TEMPERATURE_UNIT,
        "steady_state": FRACTION_UNIT,
    }

    def __init__(self):
        self._validator = cerberus.Validator(self._schema)
        self._validator.allow_unknown = False

    def load(self, config_path: Optional[Union[str, Path]] = None) -> SimulationConfig:
        """Returns the defaults when no path is given, otherwise the validated file contents."""
        if config_path is None:
            logger.info("No configuration file given; using default settings.")
            return SimulationConfig()

        path = Path(config_path).resolve()
        logger.info(f"Loading configuration from: {path}")
        content = self._load_yaml(path)
        if not self._validator.validate(content):
            raise ConfigSchemaError(self._validator.errors, path)
        return self.from_mapping(self._validator.document, path)

    def from_mapping(self, data: Dict[str, Any], source: Path = Path("<mapping>")) -> SimulationConfig:
        changes: Dict[str, Any] = {}
        for (section, key), field_name in self._field_map.items():
            if key in data.get(section, {}):
                changes[field_name] = data[section][key]

        for key, unit in self._initial_units.items():
            if key in data.get("initial", {}):
                try:
                    changes[key] = to_magnitude(data["initial"][key], unit)
                except ValueError as e:
                    raise ConfigParsingError(details=f"Invalid initial {key}: {e}", file_path=source) from e

        for key in ("field", "temperature"):
            if key in changes and changes[key] <= 0:
                raise ConfigParsingError(details=f"Initial {key} must be positive, got {changes[key]}.", file_path=source)
        if "steady_state" in changes and not 0.0 < changes["steady_state"] <= 1.0:
            raise ConfigParsingError(details=f"Initial steady_state must be in (0, 1], got {changes['steady_state']}.", file_path=source)

        config = SimulationConfig(**changes)
        logger.debug(f"Resolved configuration: {config}")
        return config

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ConfigParsingError(details=f"Configuration file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ConfigParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ConfigParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigParsingError(details="The root of the configuration file must be a mapping.", file_path=source)
        return content


def load_config(config_path: Optional[Union[str, Path]] = None) -> SimulationConfig:
    """Convenience wrapper around `ConfigLoader().load()`."""
    return ConfigLoader().load(config_path)

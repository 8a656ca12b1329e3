# src/polsim_core/config/exceptions.py
"""
Defines custom, diagnosable exceptions for loading the simulation configuration.

`ConfigParsingError` covers file-level problems (missing file, unreadable file,
invalid YAML, wrong value types after unit conversion), while `ConfigSchemaError`
covers structural violations found by the Cerberus schema.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any

from ..errors import DiagnosableError, format_diagnostic_report


class BaseConfigError(DiagnosableError):
    """A local, concrete base class for all configuration errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Configuration Error",
            details=str(self),
            suggestion="Please check the format and content of the configuration file.",
            context={}
        )


@dataclass(frozen=True)
class ConfigParsingError(BaseConfigError):
    """
    Raised when the configuration file cannot be read, is not valid YAML, or holds
    a value that cannot be converted to the expected unit.
    """
    details: str
    file_path: Path

    def __str__(self):
        return f"Configuration error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Configuration File Error",
            details=self.details,
            suggestion="Ensure the file exists, is readable, contains valid YAML and uses units compatible with each setting.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class ConfigSchemaError(BaseConfigError):
    """
    Raised when the YAML is syntactically valid but does not conform to the
    configuration schema (unknown sections, wrong types, out-of-range values).
    """
    errors: Dict[str, Any]
    file_path: Path

    def __str__(self):
        error_lines = [f"  - In section '{k}': {v}" for k, v in sorted(self.errors.items())]
        return (
            f"Configuration schema validation failed for file '{self.file_path}':\n"
            + "\n".join(error_lines)
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(
            f"  - Section '{k}': {v}" for k, v in sorted(self.errors.items())
        )
        details = (
            "The structure of the configuration file does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type="Configuration Schema Error",
            details=details,
            suggestion="Use only the sections serial, timing, beam, initial, fluctuations and logging, with the documented keys and value ranges.",
            context={'source_file': self.file_path}
        )

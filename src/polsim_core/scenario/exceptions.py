# src/polsim_core/scenario/exceptions.py
"""
Fatal, diagnosable scenario errors.

Most scenario problems are not exceptions at all: an unknown or out-of-context
command yields a `CommandRejection` and the line is skipped. Only problems that
make the whole run meaningless are raised from here.
"""
from dataclasses import dataclass
from pathlib import Path

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass(frozen=True)
class ScenarioFileError(DiagnosableError):
    """Raised when the scenario file does not exist or cannot be read."""
    details: str
    file_path: Path

    def __str__(self):
        return f"Scenario file error '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Scenario File Error",
            details=self.details,
            suggestion="Check the scenario path and its read permissions.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class DuplicateInitBlockError(DiagnosableError):
    """Raised when a scenario opens a second init block."""
    line_number: int
    first_block_line: int

    def __str__(self):
        return f"Cannot have more than one initializer block (line {self.line_number})"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Duplicate Init Block",
            details=(
                f"An init block was opened on line {self.line_number}, but the initial "
                f"conditions were already set by the block starting on line {self.first_block_line}."
            ),
            suggestion="Merge all initial settings (mfld, temp, sdst, rand, annl) into a single init ... done block at the top of the scenario.",
            context={'line_number': self.line_number}
        )

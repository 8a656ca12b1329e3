# src/polsim_core/output/exceptions.py
from dataclasses import dataclass
from pathlib import Path

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class OutputFileError(DiagnosableError):
    """Raised when the data output file cannot be created."""
    file_path: Path
    details: str

    def __str__(self):
        return f"Could not create output file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Output File Error",
            details=self.details,
            suggestion="Check that the output directory exists and is writable, or choose another path with --output.",
            context={'source_file': self.file_path}
        )

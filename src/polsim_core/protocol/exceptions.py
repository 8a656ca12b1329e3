# src/polsim_core/protocol/exceptions.py
"""
Defines the diagnosable exceptions of the controller link.

The protocol itself has no recoverable error path: unknown control bytes are
logged and skipped, and a missing payload simply blocks. The only reportable
failure is being unable to open the channel at all.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class ChannelOpenError(DiagnosableError):
    """Raised when the serial device for the hardware controller cannot be opened."""
    device: str
    details: str

    def __str__(self):
        return f"Could not open controller channel '{self.device}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Controller Channel Error",
            details=self.details,
            suggestion="Check that the controller is connected, that the configured serial port is correct and that no other program holds it open. Use 'serial off' to run without hardware.",
            context={'device': self.device}
        )

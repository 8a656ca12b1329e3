# src/polsim_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class PolSimError(Exception):
    """Base class for all custom, user-facing errors in PolSim Core."""
    pass

class SimulationSetupError(PolSimError):
    """
    Raised when the run cannot be set up: the scenario file is missing, the output
    file cannot be created, the configuration is invalid or the controller channel
    cannot be opened. The message is a pre-formatted diagnostic report.
    """
    pass

class SimulationRunError(PolSimError):
    """
    Raised when a scenario fails while it is being executed, such as a second
    init block. The message is a pre-formatted diagnostic report.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    A common, concrete base class for all internal exceptions that are diagnosable.

    It inherits from `Exception` so it can be used in `except` clauses, and declares
    `get_diagnostic_report` abstract so every subclass has to provide a report.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Scenario File Error").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: A dictionary of contextual information (source file, line, device, ...).

    Returns:
        A formatted, user-friendly diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "================ PolSim Core: Actionable Diagnostic Report ================",
        f"Error Type:     {error_type}",
    ]
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if line_number := context.get('line_number'):
        lines.append(f"Line:           {line_number}")
    if user_input := context.get('user_input'):
        lines.append(f"User Input:     '{user_input}'")
    if device := context.get('device'):
        lines.append(f"Device:         {device}")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("=========================================================================")
    return "\n".join(lines)

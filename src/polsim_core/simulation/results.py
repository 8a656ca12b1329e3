# src/polsim_core/simulation/results.py
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from ..scenario.rejections import CommandRejection
from ..state import SimulationState


@dataclass(frozen=True)
class RunSummary:
    """
    The result of executing one scenario.

    Attributes:
        output_path: Where the data rows were written.
        rows_written: Number of data rows (excluding the header).
        rejections: Every scenario line that was reported and skipped, in order.
        final_state: The simulation state after the last command.
    """
    output_path: Path
    rows_written: int
    rejections: Tuple[CommandRejection, ...]
    final_state: SimulationState

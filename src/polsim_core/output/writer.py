# src/polsim_core/output/writer.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Union

from ..dynamics.polarization import optimal_frequency_positive
from ..state import SimulationState
from .exceptions import OutputFileError

logger = logging.getLogger(__name__)

HEADER = "#Time    Frequency    Polarization*100    Dose    Polarization_rate*100    Optimal_freq_positive    Direction   k_val"

#: Written in the direction column when no controller is attached.
NO_DIRECTION = "N/A"


@dataclass(frozen=True)
class OutputRow:
    """One data row: the simulation state as of a completed step or controller cycle."""
    time: float
    frequency: float
    polarization_percent: float
    dose: float
    polarization_rate_percent: float
    optimal_frequency_positive: float
    direction: Optional[int]
    k_val: float

    @classmethod
    def from_state(cls, state: SimulationState) -> "OutputRow":
        return cls(
            time=state.time,
            frequency=state.frequency,
            polarization_percent=100.0 * state.polarization,
            dose=state.dose,
            polarization_rate_percent=100.0 * state.polarization_rate,
            optimal_frequency_positive=optimal_frequency_positive(state.dose, state.field),
            direction=state.direction,
            k_val=state.k_val,
        )

    def format(self) -> str:
        direction = NO_DIRECTION if self.direction is None else str(self.direction)
        return (
            f"{self.time:f} {self.frequency:f} {self.polarization_percent:f} {self.dose:f} "
            f"{self.polarization_rate_percent:f} {self.optimal_frequency_positive:f} {direction} {self.k_val:f}"
        )


class DataWriter:
    """Writes the header and one formatted line per data row, flushing each row."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.rows_written = 0
        self.stream.write(HEADER + "\n")

    @classmethod
    def open(cls, path: Union[str, Path]) -> "DataWriter":
        path = Path(path)
        try:
            stream = path.open("w", encoding="utf-8")
        except OSError as e:
            raise OutputFileError(file_path=path, details=str(e)) from e
        logger.info(f"Writing data to {path}")
        return cls(stream)

    def write_row(self, state: SimulationState) -> OutputRow:
        row = OutputRow.from_state(state)
        self.stream.write(row.format() + "\n")
        self.stream.flush()
        self.rows_written += 1
        return row

    def close(self):
        self.stream.close()

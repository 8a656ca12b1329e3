# src/polsim_core/output/__init__.py
from .writer import DataWriter, OutputRow, HEADER, NO_DIRECTION
from .exceptions import OutputFileError

__all__ = [
    "DataWriter",
    "OutputRow",
    "HEADER",
    "NO_DIRECTION",
    "OutputFileError",
]

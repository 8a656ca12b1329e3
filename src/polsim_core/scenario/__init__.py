# src/polsim_core/scenario/__init__.py
from .tokenizer import ScenarioLine, tokenize, tokenize_lines, read_scenario
from .commands import CommandKind
from .rejections import CommandRejection, RejectionCode
from .interpreter import ScenarioInterpreter, resolve_serial_mode
from .exceptions import ScenarioFileError, DuplicateInitBlockError

__all__ = [
    # Tokenizing
    "ScenarioLine", "tokenize", "tokenize_lines", "read_scenario",
    # Commands
    "CommandKind", "ScenarioInterpreter", "resolve_serial_mode",
    # Rejections
    "CommandRejection", "RejectionCode",
    # Exceptions
    "ScenarioFileError", "DuplicateInitBlockError",
]

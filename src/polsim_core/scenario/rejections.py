# src/polsim_core/scenario/rejections.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)


class RejectionCode(Enum):
    """
    Registry of scenario rejection codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """
    UNKNOWN_COMMAND = ("SCN_UNKNOWN", "Unknown command '{command}'.")
    MISSING_ARGUMENT = ("SCN_ARGS", "Command '{command}' expects {expected} argument(s), got {given}.")
    INVALID_ARGUMENT = ("SCN_ARG_VALUE", "Invalid argument '{argument}' for '{command}': {reason}")
    INVALID_SWITCH = ("SCN_ARG_SWITCH", "Command '{command}' expects 'on' or 'off', got '{argument}'.")

    NOT_IN_INIT_BLOCK = ("SCN_INIT_REQUIRED", "Command '{command}' is only allowed inside an init block.")
    INSIDE_INIT_BLOCK = ("SCN_INIT_OPEN", "Command '{command}' cannot run inside the init block; close it with 'done' first.")
    INIT_ALREADY_OPEN = ("SCN_INIT_NESTED", "An init block is already open.")
    NO_OPEN_INIT_BLOCK = ("SCN_INIT_UNMATCHED", "'done' without a matching 'init'.")

    FOLLOW_WHILE_SERIAL = ("SCN_FOLLOW_SERIAL", "Can't follow the ideal frequency when serial is enabled.")
    SERIAL_NOT_FIRST = ("SCN_SERIAL_POSITION", "'serial' is only honored as the first command; the mode is fixed for the run.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"


@dataclass(frozen=True)
class CommandRejection:
    """A scenario line that was reported and skipped."""
    code: RejectionCode
    line_number: int
    text: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, code: RejectionCode, line_number: int, text: str, **kwargs) -> "CommandRejection":
        return cls(
            code=code,
            line_number=line_number,
            text=text,
            message=code.format_message(**kwargs),
            details=kwargs,
        )

    def __str__(self) -> str:
        return f"[{self.code.code}] line {self.line_number}: '{self.text}': {self.message}"

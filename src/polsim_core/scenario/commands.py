# src/polsim_core/scenario/commands.py
import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    """Scenario commands, keyed by their script word."""
    SERIAL = "serial"
    INIT = "init"
    DONE = "done"
    FIELD = "mfld"
    TEMPERATURE = "temp"
    STEADY_STATE = "sdst"
    RANDOMNESS = "rand"
    FREQUENCY = "freq"
    FOLLOW = "fllw"
    BEAM = "beam"
    TRIP = "trip"
    ANNEAL = "annl"
    TIME = "time"

    @classmethod
    def from_word(cls, word: str) -> Optional["CommandKind"]:
        try:
            return cls(word)
        except ValueError:
            return None

    @property
    def init_only(self) -> bool:
        """Parameter commands that may only appear inside the init block."""
        return self in _INIT_ONLY

    @property
    def timed(self) -> bool:
        """Commands that run the clock and so may not appear inside the init block."""
        return self in _TIMED


_INIT_ONLY = frozenset({CommandKind.FIELD, CommandKind.TEMPERATURE, CommandKind.STEADY_STATE, CommandKind.RANDOMNESS})
_TIMED = frozenset({CommandKind.TIME, CommandKind.TRIP})

#: Number of arguments each command requires.
REQUIRED_ARGS = {
    CommandKind.SERIAL: 1,
    CommandKind.INIT: 0,
    CommandKind.DONE: 0,
    CommandKind.FIELD: 1,
    CommandKind.TEMPERATURE: 1,
    CommandKind.STEADY_STATE: 1,
    CommandKind.RANDOMNESS: 1,
    CommandKind.FREQUENCY: 1,
    CommandKind.FOLLOW: 1,
    CommandKind.BEAM: 1,
    CommandKind.TRIP: 1,
    CommandKind.ANNEAL: 2,
    CommandKind.TIME: 1,
}

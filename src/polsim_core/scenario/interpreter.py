# src/polsim_core/scenario/interpreter.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING

from ..dynamics import BeamController, reset_steady_state
from ..state import SimulationState
from ..units import FREQUENCY_UNIT, FIELD_UNIT, TEMPERATURE_UNIT, TIME_UNIT, FRACTION_UNIT, to_magnitude
from .commands import CommandKind, REQUIRED_ARGS
from .exceptions import DuplicateInitBlockError
from .rejections import CommandRejection, RejectionCode
from .tokenizer import ScenarioLine

# Runtime import would cycle through polsim_core.simulation.execution.
if TYPE_CHECKING:
    from ..simulation.runner import SimulationRunner

logger = logging.getLogger(__name__)

#: Prefix marking a `time` argument as relative to the current simulated time.
RELATIVE_PREFIX = "+"

_SWITCH_VALUES = {"on": True, "off": False}


class _Rejected(Exception):
    """Internal: carries a rejection out of argument parsing helpers."""
    def __init__(self, rejection: CommandRejection):
        super().__init__(str(rejection))
        self.rejection = rejection


def resolve_serial_mode(line: ScenarioLine, default: bool) -> Tuple[bool, Optional[CommandRejection]]:
    """
    Reads the serial mode from the scenario's first command.

    An invalid argument keeps `default` and is reported as a rejection.
    """
    if not line.args:
        return default, CommandRejection.create(
            RejectionCode.MISSING_ARGUMENT, line.line_number, line.text,
            command=line.command, expected=1, given=0)
    value = _SWITCH_VALUES.get(line.args[0])
    if value is None:
        return default, CommandRejection.create(
            RejectionCode.INVALID_SWITCH, line.line_number, line.text,
            command=line.command, argument=line.args[0])
    logger.info(f"Serial communications {'on' if value else 'off'}")
    return value, None


class ScenarioInterpreter:
    """
    Executes scenario commands against the simulation state.

    Each command is dispatched on its `CommandKind` to a handler that returns None
    when the command was applied, or a `CommandRejection` when it was skipped.
    Context rules are checked before dispatch: parameter commands need an open init
    block, and timed runs need it closed.
    """

    def __init__(self, state: SimulationState, runner: SimulationRunner, beam: BeamController):
        self.state = state
        self.runner = runner
        self.beam = beam
        self.rejections: List[CommandRejection] = []
        self._init_line: Optional[int] = None
        self._handlers: Dict[CommandKind, Callable[[ScenarioLine], Optional[CommandRejection]]] = {
            CommandKind.SERIAL: self._serial,
            CommandKind.INIT: self._init,
            CommandKind.DONE: self._done,
            CommandKind.FIELD: self._field,
            CommandKind.TEMPERATURE: self._temperature,
            CommandKind.STEADY_STATE: self._steady_state,
            CommandKind.RANDOMNESS: self._randomness,
            CommandKind.FREQUENCY: self._frequency,
            CommandKind.FOLLOW: self._follow,
            CommandKind.BEAM: self._beam,
            CommandKind.TRIP: self._trip,
            CommandKind.ANNEAL: self._anneal,
            CommandKind.TIME: self._time,
        }

    def run(self, lines: Iterable[ScenarioLine]) -> List[CommandRejection]:
        for line in lines:
            self.execute(line)
        return self.rejections

    def execute(self, line: ScenarioLine) -> Optional[CommandRejection]:
        """
        Executes a single command.

        Raises:
            DuplicateInitBlockError: If the line opens a second init block.
        """
        try:
            rejection = self._dispatch(line)
        except _Rejected as r:
            rejection = r.rejection
        if rejection is not None:
            logger.warning(f"Invalid command: {rejection}")
            self.rejections.append(rejection)
        return rejection

    def _dispatch(self, line: ScenarioLine) -> Optional[CommandRejection]:
        kind = CommandKind.from_word(line.command)
        if kind is None:
            return self._reject(line, RejectionCode.UNKNOWN_COMMAND, command=line.command)
        if kind.init_only and not self.state.in_init_block:
            return self._reject(line, RejectionCode.NOT_IN_INIT_BLOCK, command=line.command)
        if kind.timed and self.state.in_init_block:
            return self._reject(line, RejectionCode.INSIDE_INIT_BLOCK, command=line.command)
        expected = REQUIRED_ARGS[kind]
        if len(line.args) < expected:
            return self._reject(line, RejectionCode.MISSING_ARGUMENT,
                                command=line.command, expected=expected, given=len(line.args))
        return self._handlers[kind](line)

    # --- Helpers ---

    @staticmethod
    def _reject(line: ScenarioLine, code: RejectionCode, **kwargs) -> CommandRejection:
        return CommandRejection.create(code, line.line_number, line.text, **kwargs)

    def _quantity(self, line: ScenarioLine, index: int, unit: str, positive: bool = False) -> float:
        argument = line.args[index]
        try:
            value = to_magnitude(argument, unit)
        except ValueError as e:
            raise _Rejected(self._reject(line, RejectionCode.INVALID_ARGUMENT,
                                         argument=argument, command=line.command, reason=str(e)))
        if positive and value <= 0:
            raise _Rejected(self._reject(line, RejectionCode.INVALID_ARGUMENT,
                                         argument=argument, command=line.command, reason="must be positive"))
        return value

    def _duration(self, line: ScenarioLine, index: int = 0) -> float:
        value = self._quantity(line, index, TIME_UNIT)
        if value < 0:
            raise _Rejected(self._reject(line, RejectionCode.INVALID_ARGUMENT,
                                         argument=line.args[index], command=line.command, reason="must not be negative"))
        return value

    def _switch(self, line: ScenarioLine) -> bool:
        value = _SWITCH_VALUES.get(line.args[0])
        if value is None:
            raise _Rejected(self._reject(line, RejectionCode.INVALID_SWITCH,
                                         command=line.command, argument=line.args[0]))
        return value

    # --- Handlers ---

    def _serial(self, line):
        return self._reject(line, RejectionCode.SERIAL_NOT_FIRST)

    def _init(self, line):
        if self.state.did_init:
            raise DuplicateInitBlockError(line_number=line.line_number, first_block_line=self._init_line or 0)
        if self.state.in_init_block:
            return self._reject(line, RejectionCode.INIT_ALREADY_OPEN)
        self.state.in_init_block = True
        self._init_line = line.line_number
        logger.info("Initializer block opened")

    def _done(self, line):
        if not self.state.in_init_block:
            return self._reject(line, RejectionCode.NO_OPEN_INIT_BLOCK)
        self.state.in_init_block = False
        self.state.did_init = True
        logger.info("Initializer block closed")

    def _field(self, line):
        self.state.field = self._quantity(line, 0, FIELD_UNIT, positive=True)
        logger.info(f"Field set to {self.state.field:f} T")

    def _temperature(self, line):
        self.state.temperature = self._quantity(line, 0, TEMPERATURE_UNIT, positive=True)
        logger.info(f"Temperature set to {self.state.temperature:f} K")
        reset_steady_state(self.state)

    def _steady_state(self, line):
        value = self._quantity(line, 0, FRACTION_UNIT, positive=True)
        if value > 1.0:
            return self._reject(line, RejectionCode.INVALID_ARGUMENT,
                                argument=line.args[0], command=line.command, reason="must not exceed 1")
        # The value is the 1 K steady state; an earlier `temp` still scales it.
        self.state.base_steady_state = value
        reset_steady_state(self.state)
        logger.info(f"Setting steady state: {value:f}")

    def _randomness(self, line):
        self.state.randomness_on = self._switch(line)
        logger.info(f"Thermal fluctuations {'enabled' if self.state.randomness_on else 'disabled'}")

    def _frequency(self, line):
        self.state.frequency = self._quantity(line, 0, FREQUENCY_UNIT, positive=True)
        logger.info(f"Change frequency: {self.state.frequency:f} GHz")

    def _follow(self, line):
        if self.state.serial_on:
            return self._reject(line, RejectionCode.FOLLOW_WHILE_SERIAL)
        self.state.follow_frequency = self._switch(line)
        logger.info("Following ideal frequency" if self.state.follow_frequency else "Not following ideal frequency")

    def _beam(self, line):
        if self._switch(line):
            self.beam.beam_on()
        else:
            self.beam.beam_off()

    def _trip(self, line):
        self.beam.trip(self._duration(line), self.runner.run_until)

    def _anneal(self, line):
        duration = self._duration(line, 0)
        temperature = self._quantity(line, 1, TEMPERATURE_UNIT, positive=True)
        self.runner.anneal(duration, temperature)

    def _time(self, line):
        argument = line.args[0]
        relative = argument.startswith(RELATIVE_PREFIX)
        value = self._quantity(line, 0, TIME_UNIT)
        target = self.state.time + value if relative else value
        self.runner.run_until(target)

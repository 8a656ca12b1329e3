# src/polsim_core/simulation/execution.py
"""
Provides the primary public API function for running a scenario.

`run_scenario` is a thin facade: it reads the scenario, opens the output and (when
paced) the controller channel, wires the state, engine, runner, beam controller and
interpreter together, and runs every command. All diagnosable failures are turned
into a single user-facing `SimulationSetupError` or `SimulationRunError`.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from ..config import SimulationConfig
from ..dynamics import BeamController, PolarizationEngine
from ..errors import DiagnosableError, SimulationRunError, SimulationSetupError, format_diagnostic_report
from ..output import DataWriter
from ..protocol import ByteChannel, ControllerCodec, ControllerLink, SerialChannel
from ..scenario import (
    CommandKind, CommandRejection, ScenarioInterpreter, ScenarioLine, read_scenario, resolve_serial_mode,
)
from ..state import SimulationState
from .clock import Clock
from .results import RunSummary
from .runner import SimulationRunner

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".txt"


def default_output_path(scenario_path: Union[str, Path]) -> Path:
    """The scenario path with '.txt' appended."""
    return Path(str(scenario_path) + OUTPUT_SUFFIX)


def run_scenario(
    scenario_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[SimulationConfig] = None,
    channel: Optional[ByteChannel] = None,
    clock: Optional[Clock] = None,
) -> RunSummary:
    """
    Runs a scenario file to completion.

    Args:
        scenario_path: The scenario script.
        output_path: Where to write data rows; defaults to `default_output_path`.
        config: Operational settings; defaults to `SimulationConfig()`.
        channel: A pre-opened controller channel for paced runs. When omitted and
                 the run is paced, the configured serial port is opened (and closed
                 again at the end).
        clock: Wall-clock source for pacing; defaults to a monotonic clock.

    Returns:
        A `RunSummary` with the number of rows written and all rejected lines.

    Raises:
        SimulationSetupError: The scenario, output file or controller channel could
                              not be opened.
        SimulationRunError: The scenario failed fatally while running.
    """
    config = config if config is not None else SimulationConfig()

    try:
        lines = read_scenario(scenario_path)
        lines, serial_on, startup_rejections = _select_mode(lines, config.serial_enabled)
        state = SimulationState.from_config(config)
        state.serial_on = serial_on
        out_path = Path(output_path) if output_path is not None else default_output_path(scenario_path)
        writer = DataWriter.open(out_path)
        owns_channel = False
        if serial_on and channel is None:
            try:
                channel = SerialChannel.open(config.serial_port, config.baudrate)
            except Exception:
                writer.close()
                raise
            owns_channel = True
    except DiagnosableError as e:
        logger.error(f"Simulation setup failed: {e}")
        raise SimulationSetupError(e.get_diagnostic_report()) from e

    try:
        engine = PolarizationEngine(
            delta_t=config.delta_t,
            substeps=config.substeps,
            base_randomness=config.base_randomness,
            rng=np.random.default_rng(config.seed),
        )
        link = ControllerLink(ControllerCodec(channel), state) if serial_on else None
        runner = SimulationRunner(state, engine, writer, delay=config.delay, link=link, clock=clock)
        if link is not None:
            link.on_row = runner.emit_row
        interpreter = ScenarioInterpreter(state, runner, BeamController(state, config.dose_rate))
        interpreter.rejections.extend(startup_rejections)

        logger.info(f"--- Running scenario '{scenario_path}' ({'paced' if serial_on else 'unpaced'}) ---")
        interpreter.run(lines)
        logger.info(f"Simulation finished successfully at t={state.time:f} s, {writer.rows_written} row(s) written.")
        return RunSummary(
            output_path=out_path,
            rows_written=writer.rows_written,
            rejections=tuple(interpreter.rejections),
            final_state=state,
        )

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during the simulation: {e}")
        raise SimulationRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during the simulation: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Simulation Error Occurred ({type(e).__name__})",
            details=f"The simulator encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={'source_file': scenario_path}
        )
        raise SimulationRunError(report) from e

    finally:
        writer.close()
        if owns_channel:
            channel.close()


def _select_mode(lines: List[ScenarioLine], default: bool):
    """Consumes a leading 'serial' command and returns (remaining lines, serial_on, rejections)."""
    rejections: List[CommandRejection] = []
    if lines and CommandKind.from_word(lines[0].command) is CommandKind.SERIAL:
        serial_on, rejection = resolve_serial_mode(lines[0], default)
        if rejection is not None:
            logger.warning(f"Invalid serial instruction, continuing with serial {'on' if default else 'off'}: {rejection}")
            rejections.append(rejection)
        return lines[1:], serial_on, rejections
    return lines, default, rejections

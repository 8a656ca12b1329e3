"""Command-line entry point for running a polarized-target scenario."""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .errors import DiagnosableError, PolSimError, SimulationSetupError
from .log_config import setup_logging
from .simulation import run_scenario

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polsim",
        description="Simulate polarization and dose of a polarized target from a scenario script.",
    )
    parser.add_argument("scenario", nargs="?", help="Scenario script (prompted for when omitted).")
    parser.add_argument("-c", "--config", help="YAML configuration file.")
    parser.add_argument("-o", "--output", help="Data output file (default: <scenario>.txt).")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Overrides the configured log level.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    scenario = args.scenario
    if scenario is None:
        try:
            scenario = input("Enter the filename of the script: ").strip()
        except EOFError:
            print("\nNo scenario given and no input to prompt for one.", file=sys.stderr)
            return 1

    try:
        try:
            config = load_config(args.config)
        except DiagnosableError as e:
            raise SimulationSetupError(e.get_diagnostic_report()) from e
        setup_logging(args.log_level or config.log_level)
        summary = run_scenario(scenario, args.output, config)
    except PolSimError as e:
        logger.error("Simulation aborted.")
        print(e, file=sys.stderr)
        return 1

    print(f"Wrote {summary.rows_written} row(s) to {summary.output_path}")
    if summary.rejections:
        print(f"{len(summary.rejections)} line(s) were rejected:")
        for rejection in summary.rejections:
            print(f"  {rejection}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

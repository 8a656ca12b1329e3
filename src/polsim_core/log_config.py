# --- src/polsim_core/log_config.py ---
import logging
import sys
from typing import Union

def setup_logging(level: Union[int, str] = logging.INFO):
    """ Configures basic logging to stdout. """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"
    )
    root_logger = logging.getLogger() # Get the root logger

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    logging.debug("Logging configured.")

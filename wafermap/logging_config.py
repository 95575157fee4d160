# -*- coding: utf-8 -*-
"""
logging_config.py

Logging for the wafer map scripts. Console lines read like the script's own
progress prints ("Loaded 312 chips for VTH (V)"); an optional log file keeps
timestamps and module names for later inspection.
"""

import logging
import sys

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def setup_logging(level=logging.INFO, log_file=None):
    """Route the 'wafermap' logger to stdout (and ``log_file`` if given)."""
    logger = logging.getLogger("wafermap")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    return logger

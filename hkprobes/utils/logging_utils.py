"""
Logging utilities for the housekeeping probe selection pipeline.

All package modules log under the ``hkprobes`` namespace, so configuring
that one logger controls the output of every selection step.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "hkprobes"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    verbose: bool = False
) -> logging.Logger:
    """
    Configure the pipeline logger with console and optional file output.

    Calling it again replaces the handlers, so the CLI can first log to the
    console and later add the log file named in the configuration.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional path to log file; parent directories are created
        console: Whether to output to stdout
        verbose: Force DEBUG level, for the ``-v`` flag

    Returns:
        Configured logger instance
    """
    if verbose:
        level = logging.DEBUG

    logger = logging.getLogger(name)
    logger.setLevel(level)
    for old in logger.handlers:
        old.close()
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

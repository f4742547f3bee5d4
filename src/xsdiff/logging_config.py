"""
Logging configuration for xsdiff.

Log records go to stderr through a rich handler so they never mix with the
report, which is written to stdout or a file. A log file, when given,
receives the same records as plain timestamped lines.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "xsdiff"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Install the report's log handlers on the package logger.

    Handlers from an earlier call are closed and replaced, so the CLI can
    be invoked repeatedly in one process.

    Args:
        verbose: Enable DEBUG level logging, with locals in tracebacks
        quiet: Suppress all but ERROR level logging (wins over verbose)
        log_file: Append log records to this file as well

    Returns:
        The ``xsdiff`` package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    # Records stop here; the root logger's handlers would print them twice
    logger.propagate = False
    return logger

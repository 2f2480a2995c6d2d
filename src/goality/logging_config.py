"""
Logging configuration for goality.

Lint runs are long and mostly silent; the rich handler keeps the occasional
diagnostic (dropped issues, interrupted invocations) readable on stderr while
stdout stays reserved for the rendered report. A log file, when requested,
always receives the full debug trace of every linter invocation regardless of
the console verbosity.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "goality"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def console_level(verbose: bool = False, quiet: bool = False) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route goality's diagnostics to stderr, and optionally to a file.

    Args:
        verbose: Show DEBUG records on the console
        quiet: Show only ERROR records on the console
        log_file: Optional file that receives every record down to DEBUG

    Returns:
        The ``goality`` logger
    """
    level = console_level(verbose, quiet)

    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        # Linter messages contain brackets that are not rich markup.
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    rich_handler.setLevel(level)
    handlers: list[logging.Handler] = [rich_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # Repeated CLI invocations in one process (tests) replace the handlers.
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else level)
    if verbose:
        logger.debug("Using verbose logging")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'goality.lint.scheduler')
              If None, returns the root goality logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)

"""
Logging setup for the CLI.
Routes stdlib logging through rich on stderr.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "qcopy"


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI verbosity flags to a logging level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Attach a single rich handler to the package logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(verbose, quiet))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger

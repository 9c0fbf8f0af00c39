"""Logging configuration helpers."""

import logging


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure logging for the command line tools with a single stream handler."""
    logger = logging.getLogger("mise")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def verbosity_to_level(verbosity: int) -> int:
    """Map a count of ``-v`` flags onto a log level."""
    if verbosity <= 0:
        return logging.WARNING
    elif verbosity == 1:
        return logging.INFO
    else:
        return logging.DEBUG

"""Logging utilities for tmplgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "tmplgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the tmplgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, debug: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the tmplgen logger with console output and optional file sink.

    Warnings and errors are always shown; ``verbose`` adds progress messages and
    ``debug`` adds registry traffic and dependency decisions.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[tmplgen] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    if debug and verbose:
        logger.warning("Specified both --verbose and --debug! Will ignore --verbose.")

    return logger


__all__ = ["configure_logging", "get_logger"]

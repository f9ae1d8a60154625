"""Logger hierarchy for registrykit; modules log under ``registrykit.<area>``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

ROOT_LOGGER = "registrykit"
CONSOLE_FORMAT = "[registrykit] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(area: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{area}" if area else ROOT_LOGGER)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install the console handler and, with ``log_file``, a debug-level file log.

    The file log always records debug detail (every fetched and written path)
    so an install can be audited afterwards without rerunning with ``-v``.
    Calling this again replaces the handlers from the previous call.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    audit = logging.FileHandler(log_file, encoding="utf-8")
    audit.setLevel(logging.DEBUG)
    audit.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(audit)
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]

"""Debug logging to a file."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, TypeVar, Union

T = TypeVar("T")

LOGGER_NAME = "wiremix"
LOG_LEVEL_VARIABLE = "WIREMIX_LOG"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}

_handler: Optional[logging.Handler] = None


def _level_from_env() -> int:
    value = os.environ.get(LOG_LEVEL_VARIABLE)
    if value is None:
        raise RuntimeError(f"{LOG_LEVEL_VARIABLE} is not set")
    level = _LEVELS.get(value.strip().lower())
    if level is None:
        raise ValueError(f"invalid log level in {LOG_LEVEL_VARIABLE}: {value!r}")
    return level


def initialize_logging(directory: Union[str, os.PathLike[str]] = ".") -> Path:
    """Log to ``wiremix.log`` in ``directory`` at the level set in the environment.

    The file is truncated. Returns the path of the log file.
    """
    global _handler
    level = _level_from_env()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / f"{LOGGER_NAME}.log"

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(filename)s:%(lineno)d: %(message)s")
    )
    handler.setLevel(level)

    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
    logger.addHandler(handler)
    logger.setLevel(level)
    _handler = handler
    return log_path


def trace_dbg(
    value: T,
    label: Optional[str] = None,
    level: int = logging.DEBUG,
    logger: Union[logging.Logger, str, None] = None,
) -> T:
    """Log ``value`` and return it unchanged."""
    if logger is None:
        logger = logging.getLogger(LOGGER_NAME)
    elif isinstance(logger, str):
        logger = logging.getLogger(logger)
    message = f"value={value!r}" if label is None else f"{label} value={value!r}"
    logger.log(level, message, stacklevel=2)
    return value
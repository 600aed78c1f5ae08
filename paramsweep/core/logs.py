from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "PARAMSWEEP_LOG_LEVEL"
LOGGER_NAME = "paramsweep"

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def default_log_level() -> str:
    return (os.getenv(LOG_LEVEL_ENV, "") or "").strip().upper() or "WARNING"


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Send `paramsweep.*` records to the current stderr.

    Safe to call repeatedly: one handler is installed, later calls only update
    its stream and the level.
    """

    if level is None:
        level = default_log_level()
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, "_paramsweep", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._paramsweep = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    else:
        handler.stream = sys.stderr  # type: ignore[attr-defined]
    return logger

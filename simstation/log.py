"""Custom logging level and log helpers for SimStation.

Levels (ascending):
    TRACE =  5  : every argv launched, raw output sizes, dropped lines
    DEBUG = 10  : command failures, registry swaps, skipped requests
    INFO  = 20  : state changes applied to the registry (default)

Usage:
    import simstation.log  # registers TRACE once, before loggers are used
    logger = logging.getLogger(__name__)
    logger.trace("launching %s", format_argv(descriptor.argv))
"""

from __future__ import annotations

import logging
import shlex
from typing import Iterable

TRACE: int = 5

if logging.getLevelName(TRACE) != "TRACE":
    logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[attr-defined]


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _trace  # type: ignore[attr-defined]


def format_argv(argv: Iterable[str]) -> str:
    """Render an argument vector the way it would be typed in a shell."""
    return shlex.join(list(argv))


def truncate(text: str, limit: int = 200) -> str:
    """Shorten *text* for single-line log records."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + f"... ({len(text) - limit} more chars)"

"""Loguru configuration for the command-line driver."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Literal, TextIO

from loguru import logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_FORMAT = "<level>{level: <8}</level> <cyan>{name}</cyan> - {message}"

_HANDLER_IDS: list[int] = []


def configure_logging(
    level: LogLevel = "WARNING",
    *,
    sink: Callable[[str], None] | TextIO | None = None,
) -> None:
    """Replace existing handlers with a single sink at ``level``.

    Calling it again swaps the handler rather than adding a second one. The
    default sink looks up ``sys.stderr`` on every write so redirected
    streams are honored.
    """
    if not _HANDLER_IDS:
        logger.remove()
    while _HANDLER_IDS:
        logger.remove(_HANDLER_IDS.pop())
    handler_id = logger.add(
        sink or _stderr_sink,
        level=level,
        format=_FORMAT,
        colorize=False,
        backtrace=False,
        diagnose=False,
    )
    _HANDLER_IDS.append(handler_id)


def _stderr_sink(message: str) -> None:
    sys.stderr.write(message)

"""
Log level parsing and console handler setup.

Levels accept the same spellings the harness uses in ``LOG_LEVEL``:
names (trace, debug, info, log, warn, error) in any case, or the
numbers 0-5 in the same order.
"""

from __future__ import annotations

import logging as _logging

import rich.console as _rich_console
import rich.logging as _rich_logging

import stepdata.constants as constants

TRACE = constants.TRACE

_logging.addLevelName(TRACE, "TRACE")

LEVEL_NAMES: dict[str, int] = {
    "trace": TRACE,
    "debug": _logging.DEBUG,
    "info": _logging.INFO,
    "log": _logging.INFO,
    "warn": _logging.WARNING,
    "warning": _logging.WARNING,
    "error": _logging.ERROR,
}
"""Accepted level names mapped to stdlib numeric levels."""

_NUMERIC_LEVELS: tuple[int, ...] = (
    TRACE,
    _logging.DEBUG,
    _logging.INFO,
    _logging.INFO,
    _logging.WARNING,
    _logging.ERROR,
)

# Marker attribute so repeated configure_logging() calls replace our handler
_HANDLER_MARKER = "_stepdata_console"


def parse_level(value: str | int | None) -> int:
    """
    Convert a harness log level value to a stdlib logging level.

    Args:
        value: Level name, numeric string ("0".."5"), int 0..5, or None.

    Returns:
        The stdlib numeric level. None yields the default level.

    Raises:
        ValueError: If the value is not a recognized level.
    """
    if value is None:
        return LEVEL_NAMES[constants.DEFAULT_LOG_LEVEL]

    if isinstance(value, bool):
        raise ValueError(f"Invalid log level: {value!r}")

    if isinstance(value, int):
        if 0 <= value < len(_NUMERIC_LEVELS):
            return _NUMERIC_LEVELS[value]
        raise ValueError(f"Invalid log level: {value!r} (expected 0-{len(_NUMERIC_LEVELS) - 1})")

    if not isinstance(value, str):
        raise ValueError(f"Invalid log level: {value!r}")

    text = value.strip().lower()
    if text.isdigit():
        return parse_level(int(text))

    try:
        return LEVEL_NAMES[text]
    except KeyError:
        valid = ", ".join(sorted(LEVEL_NAMES))
        raise ValueError(f"Invalid log level: {value!r}. Valid: {valid}") from None


def configure_logging(
    level: str | int | None = None,
    *,
    console: _rich_console.Console | None = None,
) -> _logging.Logger:
    """
    Attach a rich console handler to the ``stepdata`` logger.

    Safe to call repeatedly: a handler installed by a previous call is
    replaced rather than duplicated.

    Args:
        level: Any value accepted by parse_level().
        console: Optional rich Console (defaults to stderr).

    Returns:
        The configured ``stepdata`` logger.
    """
    numeric_level = parse_level(level)
    logger = _logging.getLogger("stepdata")

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)

    handler = _rich_logging.RichHandler(
        console=console or _rich_console.Console(stderr=True),
        show_path=False,
        markup=False,
    )
    setattr(handler, _HANDLER_MARKER, True)
    handler.setLevel(numeric_level)

    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return logger

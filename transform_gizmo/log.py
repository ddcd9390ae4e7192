"""
transform_gizmo.log - Logging module with proper Python exception handling.

Usage:
    from transform_gizmo import log

    log.info("Hello")
    log.warn("Something wrong")

    try:
        do_something()
    except Exception as e:
        log.error(e, "Failed to do something")  # includes traceback
"""

import logging
import traceback
from enum import IntEnum
from typing import Callable

_logger = logging.getLogger("transform_gizmo")
_callback: Callable[["Level", str], None] | None = None


class Level(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR


def _emit(level: Level, msg: str) -> None:
    _logger.log(int(level), msg)
    if _callback is not None and _logger.isEnabledFor(int(level)):
        _callback(level, msg)


def debug(msg_or_exc, context: str = ""):
    """Log debug message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(Level.DEBUG, msg_or_exc, context)
    else:
        _emit(Level.DEBUG, str(msg_or_exc))


def info(msg_or_exc, context: str = ""):
    """Log info message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(Level.INFO, msg_or_exc, context)
    else:
        _emit(Level.INFO, str(msg_or_exc))


def warn(msg_or_exc, context: str = ""):
    """Log warning message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(Level.WARN, msg_or_exc, context)
    else:
        _emit(Level.WARN, str(msg_or_exc))


def warning(msg_or_exc, context: str = ""):
    """Alias for warn()."""
    warn(msg_or_exc, context)


def error(msg_or_exc, context: str = ""):
    """Log error message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(Level.ERROR, msg_or_exc, context)
    else:
        _emit(Level.ERROR, str(msg_or_exc))


def exception(msg: str = ""):
    """Log error with current exception traceback."""
    _emit(Level.ERROR, f"{msg}\n{traceback.format_exc()}" if msg else traceback.format_exc())


def set_level(level: Level) -> None:
    """Minimum level passed to handlers and the callback."""
    _logger.setLevel(int(level))


def set_callback(callback: Callable[[Level, str], None] | None) -> None:
    """Route every emitted message to callback(level, text) as well."""
    global _callback
    _callback = callback


def _log_exception(level: Level, exc: BaseException, context: str):
    """Format and log exception with traceback."""
    exc_type = type(exc).__name__
    exc_msg = str(exc)

    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    if context:
        full_msg = f"{context}: {exc_type}: {exc_msg}\n{tb}"
    else:
        full_msg = f"{exc_type}: {exc_msg}\n{tb}"

    _emit(level, full_msg)

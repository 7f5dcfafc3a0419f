"""
cpurast.log - thin facade over the "cpurast" logger.

Every function takes either a message or an exception; exceptions are
written together with their traceback and an optional context prefix.

Usage:
    from cpurast import log

    log.info("Loading mesh")
    try:
        render_files(...)
    except AssetError as e:
        log.error(e, "Render aborted")
"""

import logging
import traceback

_logger = logging.getLogger("cpurast")


def _format_exception(exc: BaseException, context: str) -> str:
    header = f"{type(exc).__name__}: {exc}"
    if context:
        header = f"{context}: {header}"
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"{header}\n{tb}"


def _emit(level: int, msg_or_exc, context: str) -> None:
    if isinstance(msg_or_exc, BaseException):
        _logger.log(level, _format_exception(msg_or_exc, context))
    else:
        _logger.log(level, str(msg_or_exc))


def debug(msg_or_exc, context: str = ""):
    _emit(logging.DEBUG, msg_or_exc, context)


def info(msg_or_exc, context: str = ""):
    _emit(logging.INFO, msg_or_exc, context)


def warn(msg_or_exc, context: str = ""):
    _emit(logging.WARNING, msg_or_exc, context)


warning = warn


def error(msg_or_exc, context: str = ""):
    _emit(logging.ERROR, msg_or_exc, context)


def exception(msg: str = ""):
    """Log msg at ERROR level with the exception currently being handled."""
    _logger.exception(msg)


def set_level(level):
    """Set threshold for the cpurast logger (int or name like "DEBUG")."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    _logger.setLevel(level)


def setup_console(level=logging.INFO):
    """Attach a stderr handler to the cpurast logger (used by the CLI)."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    _logger.addHandler(handler)
    set_level(level)
    return handler

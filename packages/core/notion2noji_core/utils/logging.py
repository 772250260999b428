"""Logging for the core package.

Every module logs through a child of the ``notion2noji_core`` logger, which
owns the only handler. Output goes to stderr so it never mixes with command
output. The level comes from NOTION2NOJI_LOG_LEVEL, then LOG_LEVEL, and can be
changed at runtime with set_log_level.
"""

import inspect
import logging
import os
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

PACKAGE_LOGGER = "notion2noji_core"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

F = TypeVar("F", bound=Callable[..., Any])


def _level_from_env() -> str:
    return os.environ.get("NOTION2NOJI_LOG_LEVEL") or os.environ.get(
        "LOG_LEVEL", "INFO"
    )


def _to_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_to_level(_level_from_env()))
    return logger


def set_log_level(level: str | int) -> None:
    """Set the level for every core module; unknown names fall back to INFO."""
    _package_logger().setLevel(_to_level(level))


def get_logger(name: str) -> logging.Logger:
    """Get a module logger that reports through the package handler.

    Args:
        name: Logger name (typically __name__)
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def log_exceptions(logger: logging.Logger) -> Callable[[F], F]:
    """Decorator that logs an exception with its traceback and re-raises it."""

    def decorator(func: F) -> F:
        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"{func.__qualname__} failed: {e}")
                raise

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"{func.__qualname__} failed: {e}")
                raise

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator

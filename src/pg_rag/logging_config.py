"""Logging setup and a latency-logging decorator."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger once for the whole process."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def log_latency(operation_name: str) -> Callable:
    """Log wall-clock latency and outcome of the decorated callable.

    Works for both plain functions and coroutine functions. Exceptions are
    logged once, with traceback, and re-raised unchanged.
    """

    def decorator(func: Callable) -> Callable:
        logger = logging.getLogger(func.__module__)

        def _log(start: float, error: BaseException | None) -> None:
            latency_ms = (time.perf_counter() - start) * 1000
            if error is None:
                logger.info("%s | latency_ms=%.2f | status=success", operation_name, latency_ms)
            else:
                logger.error(
                    "%s | latency_ms=%.2f | status=error | error=%s",
                    operation_name,
                    latency_ms,
                    error,
                    exc_info=error,
                )

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                _log(start, exc)
                raise
            _log(start, None)
            return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _log(start, exc)
                raise
            _log(start, None)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator

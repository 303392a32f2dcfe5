from __future__ import annotations

import functools
import inspect
import logging
import os
import time
from typing import Any, Callable, Optional, Protocol

from .levels import LogLevel


class SupportsStr(Protocol):
    def __str__(self) -> str: ...


Message = SupportsStr | Callable[[], SupportsStr]


class StructuredLogger:
    """Thin wrapper over ``logging.Logger`` with lazy messages and flat extras.

    ``logger.info(lambda: f"expensive {thing}", endpoint="match")`` only builds
    the string when INFO is enabled; keyword fields become record attributes
    picked up by the formatters.
    """

    def __init__(self, logger: logging.Logger, service: Optional[str] = None) -> None:
        self._logger = logger
        self._service = service

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **values: Any) -> "StructuredLogger":
        from .context import bind as bind_ctx

        bind_ctx(**values)
        return self

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, msg: Message, exc_info: Any = None, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        message = msg() if callable(msg) else msg
        extra = {k: v for k, v in fields.items() if v is not None}
        if self._service and "service" not in extra:
            extra["service"] = self._service
        self._logger.log(level, str(message), exc_info=exc_info, extra=extra, stacklevel=3)

    def trace(self, msg: Message, **fields: Any) -> None:
        self._log(int(LogLevel.TRACE), msg, **fields)

    def debug(self, msg: Message, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: Message, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def success(self, msg: Message, **fields: Any) -> None:
        self._log(int(LogLevel.SUCCESS), msg, **fields)

    def warning(self, msg: Message, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: Message, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=exc_info, **fields)

    def critical(self, msg: Message, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.CRITICAL, msg, exc_info=exc_info, **fields)


def get_logger(name: str, *, service: Optional[str] = None) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name), service=service)


def traceable(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Log entry/exit with timing when ``DEBUG_TRACE=true``; no-op otherwise."""
    if os.getenv("DEBUG_TRACE", "").lower() != "true":
        return fn

    logger = get_logger(fn.__module__, service="trace")

    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            logger.trace(lambda: f"enter {fn.__qualname__}")
            try:
                return await fn(*args, **kwargs)
            finally:
                dur_ms = round((time.perf_counter() - start) * 1000.0, 2)
                logger.trace(lambda: f"exit {fn.__qualname__}", execution_time_ms=dur_ms)

        return async_wrapper

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        logger.trace(lambda: f"enter {fn.__qualname__}")
        try:
            return fn(*args, **kwargs)
        finally:
            dur_ms = round((time.perf_counter() - start) * 1000.0, 2)
            logger.trace(lambda: f"exit {fn.__qualname__}", execution_time_ms=dur_ms)

    return wrapper

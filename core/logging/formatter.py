from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict

from .context import get_context

_LEVEL_COLORS = {
    "TRACE": "\033[90m",
    "DEBUG": "\033[37m",
    "INFO": "\033[36m",
    "SUCCESS": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"

# PUBG keys are JWTs; never let one reach a log sink.
_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE)


def mask_secrets(text: str) -> str:
    return _BEARER.sub(r"\1***", text)


def _record_metadata(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(record.created)),
        "level": record.levelname,
        "service": getattr(record, "service", None),
        "module": record.module,
        "function": record.funcName,
        "line_number": record.lineno,
    }


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    ctx = getattr(record, "log_context", None)
    return ctx if ctx is not None else get_context()


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    extras: Dict[str, Any] = {}
    for key in ("endpoint", "status", "attempt", "elapsed_ms", "execution_time_ms"):
        value = getattr(record, key, None)
        if value is not None:
            extras[key] = value
    return extras


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        md = _record_metadata(record)
        lvl = record.levelname
        parts = [
            md["timestamp"],
            lvl,
            md["service"] or "-",
            f"{md['module']}:{md['function']}:{md['line_number']}",
            mask_secrets(record.getMessage()),
        ]
        parts.extend(f"{k}={v}" for k, v in _record_extras(record).items())
        ctx = _record_context(record)
        if ctx:
            parts.append(" ".join(f"{k}={v}" for k, v in ctx.items()))
        if record.exc_info:
            parts.append(mask_secrets(self.formatException(record.exc_info)))
        line = " | ".join(parts)
        color = _LEVEL_COLORS.get(lvl, "")
        return f"{color}{line}{_RESET}" if color else line


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = _record_metadata(record)
        payload["message"] = mask_secrets(record.getMessage())
        payload.update(_record_extras(record))
        ctx = _record_context(record)
        if ctx:
            payload["context"] = ctx
        if record.exc_info:
            payload["exception"] = mask_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, default=str, separators=(",", ":"))

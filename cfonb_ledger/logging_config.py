"""Structured JSON logging for the CFONB pipeline."""
from __future__ import annotations

import datetime
import json
import logging
from typing import Any

ROOT_LOGGER = "cfonb_ledger"


class JSONFormatter(logging.Formatter):
    """Formats every record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Lets callers pass context as keyword arguments: ``logger.info("msg", line=3)``."""

    _STANDARD_ARGS = {"exc_info", "stack_info", "stacklevel", "extra"}

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra_fields = dict(extra.get("extra_fields") or {})
        new_kwargs = {}
        for key, value in kwargs.items():
            if key in self._STANDARD_ARGS:
                new_kwargs[key] = value
            else:
                extra_fields[key] = value
        extra["extra_fields"] = extra_fields
        new_kwargs["extra"] = extra
        return msg, new_kwargs


def get_logger(name: str) -> StructuredLoggerAdapter:
    return StructuredLoggerAdapter(logging.getLogger(name), {})

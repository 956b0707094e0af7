from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Optional

# Context variables for structured logging
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
operation_var: ContextVar[str] = ContextVar("operation", default="-")


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.operation = operation_var.get()
        return True


class SimpleStructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")
        msg = record.getMessage()
        return (
            f"{ts} level={record.levelname} logger={record.name} "
            f"request_id={getattr(record, 'request_id', '-')} "
            f"operation={getattr(record, 'operation', '-')} "
            f"msg={msg}"
        )


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # Replace handlers so repeated setup calls do not duplicate output
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.addFilter(ContextFilter())
    handler.setFormatter(SimpleStructuredFormatter())

    root.addHandler(handler)


def set_log_context(*, request_id: str, operation: Optional[str] = None) -> None:
    request_id_var.set(request_id)
    if operation is not None:
        operation_var.set(operation)


def set_operation(name: str) -> None:
    operation_var.set(name)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"wealthpath.{name}")

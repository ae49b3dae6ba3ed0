"""Payroll period and employee tags for log records."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_FIELDS = ("period", "employee")
_UNSET = "-"

_current: contextvars.ContextVar[dict[str, str] | None] = contextvars.ContextVar(
    "payroll_log_context", default=None
)


class PayrollLogContext:
    """Bind the period and employee being worked on to nested log calls."""

    @contextmanager
    def scope(self, *, period: object = None, employee: object = None) -> Iterator[None]:
        values = dict(_current.get() or {})
        for name, value in (("period", period), ("employee", employee)):
            if value is not None:
                values[name] = str(value)
        token = _current.set(values)
        try:
            yield
        finally:
            _current.reset(token)


class PayrollContextFilter(logging.Filter):
    """Copy ``period`` and ``employee`` onto records and build ``payroll_tag``.

    Records that already carry a tag keep it, so a queue listener thread
    (where no scope is active) does not wipe what the producer attached.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(record, "payroll_tag"):
            return True
        values = _current.get() or {}
        for name in _FIELDS:
            setattr(record, name, values.get(name, _UNSET))
        tag = " ".join(values[name] for name in _FIELDS if name in values)
        record.payroll_tag = f"[{tag}] " if tag else ""
        return True


log_context = PayrollLogContext()

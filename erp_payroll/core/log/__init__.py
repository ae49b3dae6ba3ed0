"""Logging for payroll services and operator scripts.

Records go to a rich console handler and, when a log directory is
configured, to one file per day. Both handlers sit behind a queue listener
unless ``queue=False`` is requested. Every record carries the ``period`` and
``employee`` bound with :data:`log_context`.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import PayrollContextFilter, log_context
from .timing import BatchTimer, timeit

__all__ = [
    "BatchTimer",
    "LoggingOptions",
    "get_logger",
    "init_logging",
    "log_context",
    "shutdown_logging",
    "timeit",
]

CONSOLE_FORMAT = "%(payroll_tag)s%(message)s"
FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "period=%(period)s employee=%(employee)s | %(message)s"
)


@dataclass(frozen=True)
class LoggingOptions:
    """What :func:`init_logging` sets up; defaults come from ``LOG_*`` variables."""

    app_name: str = "erp_payroll"
    level: str | int = "INFO"
    log_dir: Optional[Path] = None
    console: bool = True
    rich_tracebacks: bool = True
    queue: bool = True

    @classmethod
    def from_env(cls, **overrides: object) -> "LoggingOptions":
        unknown = set(overrides) - {option.name for option in fields(cls)}
        if unknown:
            raise TypeError(f"Unknown logging options: {', '.join(sorted(unknown))}")
        log_dir = os.getenv("LOG_DIR", "logs")
        options = cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir) if log_dir else None,
        )
        options = replace(options, **overrides)  # type: ignore[arg-type]
        if options.log_dir is not None and not isinstance(options.log_dir, Path):
            options = replace(options, log_dir=Path(options.log_dir))
        return options

    @property
    def numeric_level(self) -> int:
        if isinstance(self.level, int):
            return self.level
        resolved = logging.getLevelName(str(self.level).upper())
        return resolved if isinstance(resolved, int) else logging.INFO


class DailyFileHandler(logging.FileHandler):
    """Append to ``<prefix>_YYYY_MM_DD.log`` and move to a new file each day."""

    def __init__(self, directory: Path, prefix: str) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        self._directory = directory
        self._prefix = prefix
        self._day = date.today()
        super().__init__(self._file_for(self._day), encoding="utf-8", delay=True)

    def _file_for(self, day: date) -> Path:
        return self._directory / f"{self._prefix}_{day:%Y_%m_%d}.log"

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.fromtimestamp(record.created).date()
        if day != self._day:
            self._day = day
            if self.stream is not None:
                self.stream.close()
                self.stream = None  # type: ignore[assignment]
            self.baseFilename = os.fspath(self._file_for(day))
        super().emit(record)


class _LoggingState:
    def __init__(self) -> None:
        self.lock = RLock()
        self.options: LoggingOptions | None = None
        self.listener: QueueListener | None = None


_state = _LoggingState()
_context_filter = PayrollContextFilter()


def _payroll_handlers(options: LoggingOptions, level: int) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if options.console:
        console = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=options.rich_tracebacks,
            show_path=False,
            markup=False,
            log_time_format="%Y-%m-%d %H:%M:%S",
        )
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers.append(console)
    if options.log_dir is not None:
        prefix = options.app_name.replace("-", "_")
        daily = DailyFileHandler(options.log_dir, prefix)
        daily.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(daily)
    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(_context_filter)
    return handlers


def _reset_locked() -> None:
    if _state.listener is not None:
        _state.listener.stop()
        _state.listener = None
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    _state.options = None


def init_logging(**overrides: object) -> None:
    """Configure the root logger once per process.

    Calling again without arguments keeps the current setup. Calling with
    options that differ from the active ones rebuilds the handlers.
    """

    options = LoggingOptions.from_env(**overrides)
    with _state.lock:
        if _state.options is not None and (not overrides or options == _state.options):
            return
        _reset_locked()

        level = options.numeric_level
        if options.rich_tracebacks:
            install_rich_traceback(show_locals=False)
        handlers = _payroll_handlers(options, level)

        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        if options.queue and handlers:
            records: SimpleQueue = SimpleQueue()
            producer = QueueHandler(records)
            producer.setLevel(level)
            producer.addFilter(_context_filter)
            root.addHandler(producer)
            _state.listener = QueueListener(records, *handlers, respect_handler_level=True)
            _state.listener.start()
        else:
            for handler in handlers:
                root.addHandler(handler)
        _state.options = options


def shutdown_logging() -> None:
    """Flush and detach every handler; the next :func:`get_logger` starts over."""

    with _state.lock:
        _reset_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    with _state.lock:
        if _state.options is None:
            init_logging()
        app_name = _state.options.app_name if _state.options else "erp_payroll"
    return logging.getLogger(name or app_name)

"""Duration and throughput summaries for payroll batches."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional


class BatchTimer:
    """Context manager that logs one summary line when a batch ends.

    Call :meth:`add` once per unit handled. When ``total`` is known the
    summary reads ``3 of 4 employees``; a batch that raises is logged as an
    error and the exception propagates.
    """

    def __init__(
        self,
        label: str,
        *,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
        unit: str = "items",
        total: Optional[int] = None,
    ) -> None:
        self.label = label
        self.unit = unit
        self.total = total
        self.count = 0
        self._logger = logger or logging.getLogger("erp_payroll.batch")
        self._level = level
        self._started = 0.0

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def _progress(self) -> str:
        if self.total is None:
            return f"{self.count} {self.unit}"
        return f"{self.count} of {self.total} {self.unit}"

    def __enter__(self) -> "BatchTimer":
        self._started = perf_counter()
        return self

    def __exit__(self, exc_type, exc, traceback) -> bool:
        elapsed = perf_counter() - self._started
        if exc_type is not None:
            self._logger.error("%s failed after %.2fs: %s", self.label, elapsed, self._progress())
            return False
        summary = f"{self.label} finished in {elapsed:.2f}s: {self._progress()}"
        if self.count and elapsed > 0:
            summary += f" ({self.count / elapsed:,.0f} {self.unit}/s)"
        self._logger.log(self._level, summary)
        return False


def timeit(label: str, **options) -> BatchTimer:
    """Shorthand for ``BatchTimer(label, ...)`` in ``with`` statements."""

    return BatchTimer(label, **options)

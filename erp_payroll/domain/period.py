"""Payroll period value object."""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass

from erp_payroll.core.errors import ValidationError

_PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, slots=True, order=True)
class Period:
    """A calendar year and month identifying one payroll cycle."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not isinstance(self.year, int) or not isinstance(self.month, int):
            raise ValidationError("Period year and month must be integers")
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValidationError(f"Year must be between 1 and 9999, got {self.year}")

    @classmethod
    def of(cls, year: int, month: int) -> "Period":
        return cls(year=int(year), month=int(month))

    @classmethod
    def parse(cls, value: str) -> "Period":
        """Parse the ``YYYY-MM`` storage form."""

        match = _PERIOD_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise ValidationError(f"Period must look like YYYY-MM, got {value!r}")
        return cls(year=int(match.group(1)), month=int(match.group(2)))

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        """Human readable form used in notifications, e.g. ``June 2024``."""

        return f"{calendar.month_name[self.month]} {self.year:04d}"

    def __str__(self) -> str:
        return self.key

"""Helper functions for decimal coercion and amount formatting."""

from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce database and request values into ``Decimal`` without float noise."""

    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def format_amount(value: int | float | Decimal) -> str:
    """Format an amount with exactly two decimals, e.g. ``410000.00``.

    Half-up rounding matches how amounts are printed on payslips.
    """

    return str(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_total(value: int | float | Decimal) -> str:
    """Format an amount with thousands separators for operator output."""

    return f"{to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP):,.2f}"

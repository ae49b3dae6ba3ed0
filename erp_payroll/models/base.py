"""Base declarative class and shared column types for SQLAlchemy models."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from erp_payroll.domain.period import Period

ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
MONEY = Numeric(18, 2)
PERCENTAGE = Numeric(5, 2)
# 2dp base salary x 2dp percentage / 100 never needs more than 6 decimals.
AMOUNT = Numeric(24, 6)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PeriodType(TypeDecorator):
    """Persist a :class:`Period` as its ``YYYY-MM`` string."""

    impl = String(7)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, Period):
            return value.key
        return Period.parse(str(value)).key

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Period.parse(value)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass

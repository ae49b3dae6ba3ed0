"""Percentage based deduction and allowance rules."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, PERCENTAGE, Base


class Deduction(Base):
    """A named percentage of base salary, e.g. ``Pension`` at 6%."""

    __tablename__ = "deductions"
    __table_args__ = (
        CheckConstraint("percentage >= 0 AND percentage <= 100", name="ck_deductions_percentage"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(PERCENTAGE, nullable=False)

"""Computed payslips, one per employee and period."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from erp_payroll.domain.period import Period

from .base import AMOUNT, ID_TYPE, Base, PeriodType, utcnow


class SlipStatus(str, Enum):
    """Payslip lifecycle: created ``PENDING``, approved to ``PAID``."""

    PENDING = "PENDING"
    PAID = "PAID"


class PaySlip(Base):
    """Salary breakdown for one employee in one period."""

    __tablename__ = "pay_slips"
    __table_args__ = (
        UniqueConstraint("employee_id", "period", name="uq_pay_slips_employee_period"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False, index=True)
    period: Mapped[Period] = mapped_column(PeriodType(), nullable=False, index=True)

    house_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    transport_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    employee_tax_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    pension_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    medical_insurance_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    other_tax_amount: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    gross_salary: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(AMOUNT, nullable=False)

    status: Mapped[SlipStatus] = mapped_column(
        SQLEnum(SlipStatus, native_enum=False, length=16),
        nullable=False,
        default=SlipStatus.PENDING,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

"""Notification messages sent when a payroll period is approved."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from erp_payroll.domain.period import Period

from .base import ID_TYPE, Base, PeriodType, utcnow


class MessageStatus(str, Enum):
    """Delivery state: ``PENDING`` until the first send attempt resolves."""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class Message(Base):
    """One payroll notification addressed to an employee."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False, index=True)
    period: Mapped[Period] = mapped_column(PeriodType(), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[MessageStatus] = mapped_column(
        SQLEnum(MessageStatus, native_enum=False, length=16),
        nullable=False,
        default=MessageStatus.PENDING,
        index=True,
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

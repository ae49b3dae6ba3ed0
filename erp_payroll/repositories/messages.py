"""Persistence and queries for notification messages."""
from __future__ import annotations

from sqlalchemy import select

from erp_payroll.domain.period import Period
from erp_payroll.models import Message, MessageStatus

from .base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    model = Message

    def list_by_status(self, status: MessageStatus) -> list[Message]:
        statement = select(Message).where(Message.status == status).order_by(Message.id.asc())
        return list(self._session.execute(statement).scalars())

    def list_for_employee(self, employee_id: int) -> list[Message]:
        statement = (
            select(Message)
            .where(Message.employee_id == employee_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return list(self._session.execute(statement).scalars())

    def list_for_period(self, period: Period) -> list[Message]:
        statement = select(Message).where(Message.period == period).order_by(Message.id.asc())
        return list(self._session.execute(statement).scalars())

    def notified_employee_ids(self, period: Period) -> set[int]:
        """Employees that already have a message of any status for ``period``."""

        statement = select(Message.employee_id).where(Message.period == period).distinct()
        return set(self._session.execute(statement).scalars())

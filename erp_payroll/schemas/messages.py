"""Schema definitions for payroll notifications."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from erp_payroll.models import Message, MessageStatus


class MessageResponse(BaseModel):
    """One notification and its delivery state."""

    id: int
    employee_id: int
    period: str
    content: str
    status: MessageStatus
    attempts: int
    last_error: str | None = None
    created_at: datetime
    sent_at: datetime | None = None

    @classmethod
    def from_model(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            employee_id=message.employee_id,
            period=message.period.key,
            content=message.content,
            status=message.status,
            attempts=message.attempts,
            last_error=message.last_error,
            created_at=message.created_at,
            sent_at=message.sent_at,
        )


class ResendResponse(BaseModel):
    """Outcome of retrying failed notifications."""

    sent: list[MessageResponse]
    failed: list[MessageResponse]
    exhausted: list[MessageResponse] = []

"""Approval notifications: compose, send, record and retry."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from erp_payroll.core.config import NotificationSettings
from erp_payroll.core.formatting import format_amount
from erp_payroll.core.logger import get_logger, log_context, timeit
from erp_payroll.domain.period import Period
from erp_payroll.models import Employee, Message, MessageStatus, PaySlip, SlipStatus
from erp_payroll.models.base import utcnow
from erp_payroll.repositories import EmployeeRepository, MessageRepository, PaySlipRepository

from .mail import MailSender

LOGGER = get_logger(__name__)


def notification_subject(period: Period) -> str:
    return f"Payroll Notification - {period.label}"


def compose_message(
    employee: Employee, payslip: PaySlip, *, institution: str = "ERP System"
) -> str:
    """Render the body of the approval notification for one payslip."""

    return (
        f"Dear {employee.first_name}, your Salary of {payslip.period.label} "
        f"from {institution} (Amount: {format_amount(payslip.net_salary)}) "
        f"has been credited to your {employee.code} account successfully."
    )


@dataclass(slots=True)
class ResendResult:
    """Outcome of one retry pass over failed messages."""

    sent: list[Message] = field(default_factory=list)
    failed: list[Message] = field(default_factory=list)
    exhausted: list[Message] = field(default_factory=list)


class NotificationService:
    """Send one message per approved payslip and retry the ones that failed."""

    def __init__(
        self,
        session: Session,
        mail_sender: MailSender,
        settings: NotificationSettings | None = None,
    ) -> None:
        self._session = session
        self._mail = mail_sender
        self._settings = settings or NotificationSettings()
        self._messages = MessageRepository(session)
        self._payslips = PaySlipRepository(session)
        self._employees = EmployeeRepository(session)

    def notify_approved(self, period: Period) -> list[Message]:
        """Notify every employee with a ``PAID`` payslip for ``period``.

        Employees that already have a message for the period, whatever its
        status, are skipped. Failed deliveries are left for
        :meth:`resend_failed`.
        """

        LOGGER.info("Sending payroll notifications for %s", period)
        rows = self._payslips.list_with_employee(period, SlipStatus.PAID)
        notified = self._messages.notified_employee_ids(period)
        subject = notification_subject(period)

        created: list[Message] = []
        with log_context.scope(period=period.key), timeit(
            f"Notifications {period}", logger=LOGGER, unit="messages"
        ) as timer:
            for payslip, employee in rows:
                if employee.id in notified:
                    LOGGER.info("Employee %s was already notified for %s", employee.code, period)
                    continue
                with log_context.scope(employee=employee.code):
                    message = self._notify_one(employee, payslip, subject)
                if message is not None:
                    created.append(message)
                    timer.add()

        sent = sum(1 for message in created if message.status is MessageStatus.SENT)
        LOGGER.info(
            "Notifications for %s: %d sent, %d failed", period, sent, len(created) - sent
        )
        return created

    def resend_failed(self) -> ResendResult:
        """Retry every ``FAILED`` message with its stored content."""

        failed = self._messages.list_by_status(MessageStatus.FAILED)
        LOGGER.info("Retrying %d failed notifications", len(failed))
        result = ResendResult()
        if not failed:
            return result

        max_attempts = self._settings.max_attempts
        employees = self._employees.get_many({message.employee_id for message in failed})
        with timeit("Notification retry", logger=LOGGER, unit="messages") as timer:
            for message in failed:
                employee = employees.get(message.employee_id)
                code = employee.code if employee is not None else message.employee_id
                with log_context.scope(period=message.period.key, employee=code):
                    if max_attempts and message.attempts >= max_attempts:
                        LOGGER.warning(
                            "Message %s reached %d attempts, not retrying",
                            message.id,
                            message.attempts,
                        )
                        result.exhausted.append(message)
                        continue
                    if employee is None:
                        LOGGER.warning("Employee for message %s no longer exists", message.id)
                        result.failed.append(message)
                        continue
                    message_id = message.id
                    try:
                        self._deliver(message, employee.email, notification_subject(message.period))
                    except SQLAlchemyError:
                        self._session.rollback()
                        LOGGER.exception("Failed to record retry of message %s", message_id)
                        result.failed.append(message)
                        continue
                    timer.add()
                    if message.status is MessageStatus.SENT:
                        result.sent.append(message)
                    else:
                        result.failed.append(message)

        LOGGER.info(
            "Notification retry finished: %d sent, %d failed, %d exhausted",
            len(result.sent),
            len(result.failed),
            len(result.exhausted),
        )
        return result

    def messages_for_employee(self, employee_id: int) -> list[Message]:
        return self._messages.list_for_employee(employee_id)

    def messages_for_period(self, period: Period) -> list[Message]:
        return self._messages.list_for_period(period)

    def _notify_one(self, employee: Employee, payslip: PaySlip, subject: str) -> Message | None:
        """Record and send one message in its own transaction.

        Returns ``None`` when the database rejects the unit; the rollback
        leaves no row behind, so a later :meth:`notify_approved` picks the
        employee up again.
        """

        employee_code, to_address = employee.code, employee.email
        message = Message(
            employee_id=employee.id,
            period=payslip.period,
            content=compose_message(employee, payslip, institution=self._settings.institution),
            status=MessageStatus.PENDING,
            attempts=0,
        )
        try:
            self._messages.add(message)
            self._session.commit()
            self._deliver(message, to_address, subject)
        except SQLAlchemyError:
            self._session.rollback()
            LOGGER.exception("Failed to record notification for employee %s", employee_code)
            return None
        return message

    def _deliver(self, message: Message, to_address: str, subject: str) -> None:
        message.attempts += 1
        try:
            self._mail.send(to_address, subject, message.content)
        except Exception as exc:  # any transport error is a failed delivery
            LOGGER.exception("Failed to send notification to %s", to_address)
            message.status = MessageStatus.FAILED
            message.last_error = f"{type(exc).__name__}: {exc}"
        else:
            message.status = MessageStatus.SENT
            message.sent_at = utcnow()
            message.last_error = None
            LOGGER.info("Notification sent to %s", to_address)
        self._session.commit()


__all__ = [
    "NotificationService",
    "ResendResult",
    "compose_message",
    "notification_subject",
]

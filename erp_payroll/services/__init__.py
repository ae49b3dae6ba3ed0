"""Service layer for the payroll core."""

from .deductions import DEFAULT_RULES, DeductionService
from .mail import MailSender, SmtpMailSender, get_mail_sender
from .notifications import NotificationService, ResendResult
from .payroll import PayrollRunResult, PayrollService, PaySlipView, SkippedEmployee, SkipReason

__all__ = [
    "DEFAULT_RULES",
    "DeductionService",
    "MailSender",
    "NotificationService",
    "PayrollRunResult",
    "PayrollService",
    "PaySlipView",
    "ResendResult",
    "SkipReason",
    "SkippedEmployee",
    "SmtpMailSender",
    "get_mail_sender",
]

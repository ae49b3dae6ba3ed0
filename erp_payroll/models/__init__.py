"""Database models for the payroll domain."""
from __future__ import annotations

from .base import Base, PeriodType
from .deductions import Deduction
from .employees import Employee, EmployeeStatus, Employment, EmploymentStatus, Role
from .messages import Message, MessageStatus
from .payslips import PaySlip, SlipStatus

__all__ = [
    "Base",
    "PeriodType",
    "Deduction",
    "Employee",
    "EmployeeStatus",
    "Employment",
    "EmploymentStatus",
    "Role",
    "Message",
    "MessageStatus",
    "PaySlip",
    "SlipStatus",
]

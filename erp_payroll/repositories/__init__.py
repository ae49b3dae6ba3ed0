"""Repositories wrapping SQLAlchemy queries for the payroll services."""

from .deductions import DeductionRepository
from .employees import EmployeeRepository
from .messages import MessageRepository
from .payslips import PaySlipRepository

__all__ = [
    "DeductionRepository",
    "EmployeeRepository",
    "MessageRepository",
    "PaySlipRepository",
]

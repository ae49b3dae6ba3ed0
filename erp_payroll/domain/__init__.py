"""Compact domain values used by the payroll services."""

from .payslip import REQUIRED_RULES, PayslipAmounts, compute_payslip, missing_rules
from .period import Period

__all__ = [
    "Period",
    "PayslipAmounts",
    "REQUIRED_RULES",
    "compute_payslip",
    "missing_rules",
]

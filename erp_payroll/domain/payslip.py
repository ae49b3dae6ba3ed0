"""Pure payslip arithmetic shared by the payroll processor and its tests."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

EMPLOYEE_TAX = "Employee Tax"
PENSION = "Pension"
MEDICAL_INSURANCE = "Medical Insurance"
OTHER = "Other"
HOUSING = "Housing"
TRANSPORT = "Transport"

DEDUCTION_RULES = (EMPLOYEE_TAX, PENSION, MEDICAL_INSURANCE, OTHER)
ALLOWANCE_RULES = (HOUSING, TRANSPORT)
REQUIRED_RULES = DEDUCTION_RULES + ALLOWANCE_RULES

_HUNDRED = Decimal(100)


@dataclass(frozen=True, slots=True)
class PayslipAmounts:
    """Breakdown of one employee's pay for one period."""

    base_salary: Decimal
    house_amount: Decimal
    transport_amount: Decimal
    employee_tax_amount: Decimal
    pension_amount: Decimal
    medical_insurance_amount: Decimal
    other_tax_amount: Decimal

    @property
    def allowances_total(self) -> Decimal:
        return self.house_amount + self.transport_amount

    @property
    def deductions_total(self) -> Decimal:
        return (
            self.employee_tax_amount
            + self.pension_amount
            + self.medical_insurance_amount
            + self.other_tax_amount
        )

    @property
    def gross_salary(self) -> Decimal:
        return self.base_salary + self.allowances_total

    @property
    def net_salary(self) -> Decimal:
        return self.gross_salary - self.deductions_total


def missing_rules(rates: Mapping[str, Decimal]) -> list[str]:
    return [name for name in REQUIRED_RULES if name not in rates]


def compute_payslip(base_salary: Decimal, rates: Mapping[str, Decimal]) -> PayslipAmounts:
    """Apply percentage ``rates`` to ``base_salary``.

    Every rate is a percentage of the base salary, allowances included.
    Arithmetic stays in ``Decimal`` and is never rounded, so
    ``gross == base * (1 + A)`` and ``net == gross - base * D`` hold exactly.
    Raises ``KeyError`` when a required rule is absent from ``rates``.
    """

    base = Decimal(base_salary)

    def _portion(name: str) -> Decimal:
        return base * Decimal(rates[name]) / _HUNDRED

    return PayslipAmounts(
        base_salary=base,
        house_amount=_portion(HOUSING),
        transport_amount=_portion(TRANSPORT),
        employee_tax_amount=_portion(EMPLOYEE_TAX),
        pension_amount=_portion(PENSION),
        medical_insurance_amount=_portion(MEDICAL_INSURANCE),
        other_tax_amount=_portion(OTHER),
    )

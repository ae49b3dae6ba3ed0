"""Tests for the pure payslip computation."""
from __future__ import annotations

from decimal import Decimal

import pytest

from erp_payroll.domain.payslip import (
    EMPLOYEE_TAX,
    HOUSING,
    MEDICAL_INSURANCE,
    OTHER,
    PENSION,
    REQUIRED_RULES,
    TRANSPORT,
    compute_payslip,
    missing_rules,
)

DEFAULT_RATES = {
    EMPLOYEE_TAX: Decimal("30"),
    PENSION: Decimal("6"),
    MEDICAL_INSURANCE: Decimal("5"),
    OTHER: Decimal("5"),
    HOUSING: Decimal("14"),
    TRANSPORT: Decimal("14"),
}


def test_default_rates_on_half_million() -> None:
    amounts = compute_payslip(Decimal("500000"), DEFAULT_RATES)

    assert amounts.house_amount == Decimal("70000")
    assert amounts.transport_amount == Decimal("70000")
    assert amounts.gross_salary == Decimal("640000")
    assert amounts.employee_tax_amount == Decimal("150000")
    assert amounts.pension_amount == Decimal("30000")
    assert amounts.medical_insurance_amount == Decimal("25000")
    assert amounts.other_tax_amount == Decimal("25000")
    assert amounts.net_salary == Decimal("410000")


def test_amounts_are_exact_for_fractional_inputs() -> None:
    base = Decimal("1234.57")
    rates = {**DEFAULT_RATES, HOUSING: Decimal("13.33"), PENSION: Decimal("6.25")}

    amounts = compute_payslip(base, rates)

    allowance = (rates[HOUSING] + rates[TRANSPORT]) / 100
    deduction = (
        rates[EMPLOYEE_TAX] + rates[PENSION] + rates[MEDICAL_INSURANCE] + rates[OTHER]
    ) / 100
    assert amounts.gross_salary == base * (1 + allowance)
    assert amounts.net_salary == base * (1 + allowance) - base * deduction
    assert amounts.house_amount == Decimal("164.568181")


def test_deductions_can_exceed_gross() -> None:
    rates = {**DEFAULT_RATES, EMPLOYEE_TAX: Decimal("100"), PENSION: Decimal("50")}

    amounts = compute_payslip(Decimal("1000"), rates)

    assert amounts.net_salary < 0


def test_zero_rates_leave_base_untouched() -> None:
    rates = {name: Decimal("0") for name in REQUIRED_RULES}

    amounts = compute_payslip(Decimal("800.50"), rates)

    assert amounts.gross_salary == amounts.net_salary == Decimal("800.50")


def test_missing_rules_lists_absent_names() -> None:
    rates = {name: rate for name, rate in DEFAULT_RATES.items() if name != PENSION}

    assert missing_rules(rates) == [PENSION]
    assert missing_rules(DEFAULT_RATES) == []


def test_compute_requires_every_rule() -> None:
    with pytest.raises(KeyError):
        compute_payslip(Decimal("100"), {HOUSING: Decimal("10")})

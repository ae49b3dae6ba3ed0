"""Tests for the deduction registry."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from erp_payroll.core.errors import NotFoundError, ValidationError
from erp_payroll.domain.payslip import REQUIRED_RULES
from erp_payroll.models import Deduction
from erp_payroll.services import DeductionService


@pytest.fixture()
def service(session: Session) -> DeductionService:
    return DeductionService(session)


def _count(session: Session) -> int:
    return session.execute(select(func.count(Deduction.id))).scalar_one()


def test_seed_defaults_creates_required_rules(service: DeductionService) -> None:
    created = service.seed_defaults()

    assert {rule.name for rule in created} == set(REQUIRED_RULES)
    rates = service.rates()
    assert rates["Employee Tax"] == Decimal("30")
    assert rates["Pension"] == Decimal("6")
    assert rates["Housing"] == Decimal("14")
    assert service.get_by_code("MED_INS").name == "Medical Insurance"


def test_seed_defaults_never_overwrites(session: Session, service: DeductionService) -> None:
    service.create(code="TAX", name="Employee Tax", percentage=Decimal("20"))

    created = service.seed_defaults()

    assert len(created) == 5
    assert service.get_by_name("Employee Tax").percentage == Decimal("20")
    assert service.seed_defaults() == []
    assert _count(session) == 6


def test_create_rejects_duplicate_code_and_name(session: Session, service: DeductionService) -> None:
    service.create(code="PENSION", name="Pension", percentage=Decimal("6"))

    with pytest.raises(ValidationError):
        service.create(code="PENSION", name="Retirement", percentage=Decimal("6"))
    with pytest.raises(ValidationError):
        service.create(code="PEN2", name="Pension", percentage=Decimal("6"))
    assert _count(session) == 1


@pytest.mark.parametrize("percentage", [Decimal("-1"), Decimal("100.01"), Decimal("NaN")])
def test_create_rejects_percentage_out_of_range(service: DeductionService, percentage: Decimal) -> None:
    with pytest.raises(ValidationError):
        service.create(code="BAD", name="Bad", percentage=percentage)


def test_percentage_limited_to_two_decimals(session: Session, service: DeductionService) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.create(code="EXTRA", name="Extra", percentage=Decimal("33.335"))
    assert excinfo.value.details["field"] == "percentage"
    assert _count(session) == 0

    deduction = service.create(code="EXTRA", name="Extra", percentage=Decimal("33.330"))
    with pytest.raises(ValidationError):
        service.update(deduction.id, code="EXTRA", name="Extra", percentage=Decimal("12.001"))
    session.expire_all()
    assert service.rates()["Extra"] == Decimal("33.33")


def test_update_allows_unchanged_values(service: DeductionService) -> None:
    deduction = service.create(code="OTHER", name="Other", percentage=Decimal("5"))

    updated = service.update(deduction.id, code="OTHER", name="Other", percentage=Decimal("7.5"))

    assert updated.percentage == Decimal("7.5")
    assert service.rates()["Other"] == Decimal("7.5")


def test_update_rejects_value_held_by_another_rule(service: DeductionService) -> None:
    service.create(code="HOUSING", name="Housing", percentage=Decimal("14"))
    transport = service.create(code="TRANSPORT", name="Transport", percentage=Decimal("14"))

    with pytest.raises(ValidationError):
        service.update(transport.id, code="HOUSING", name="Transport", percentage=Decimal("14"))
    with pytest.raises(ValidationError):
        service.update(transport.id, code="TRANSPORT", name="Housing", percentage=Decimal("14"))
    assert service.get(transport.id).code == "TRANSPORT"


def test_lookups_raise_not_found(service: DeductionService) -> None:
    with pytest.raises(NotFoundError):
        service.get(42)
    with pytest.raises(NotFoundError):
        service.get_by_code("NOPE")
    with pytest.raises(NotFoundError):
        service.get_by_name("Nope")
    with pytest.raises(NotFoundError):
        service.delete(42)


def test_delete_removes_rule(session: Session, service: DeductionService) -> None:
    deduction = service.create(code="OTHER", name="Other", percentage=Decimal("5"))

    service.delete(deduction.id)

    assert _count(session) == 0
    assert "Other" not in service.rates()


def test_list_all_orders_by_id(service: DeductionService) -> None:
    service.seed_defaults()

    codes = [deduction.code for deduction in service.list_all()]

    assert codes == ["EMP_TAX", "PENSION", "MED_INS", "OTHER", "HOUSING", "TRANSPORT"]

"""Deduction registry: the named percentage rules payroll runs apply."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from erp_payroll.core.errors import NotFoundError, ValidationError
from erp_payroll.core.formatting import to_decimal
from erp_payroll.core.logger import get_logger
from erp_payroll.domain import payslip as rules
from erp_payroll.models import Deduction
from erp_payroll.repositories import DeductionRepository

LOGGER = get_logger(__name__)

_MIN_PERCENTAGE = Decimal(0)
_MAX_PERCENTAGE = Decimal(100)
# Matches the Numeric(5, 2) column; finer values would be rounded on storage.
_PERCENTAGE_STEP = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class DefaultRule:
    code: str
    name: str
    percentage: Decimal


DEFAULT_RULES: tuple[DefaultRule, ...] = (
    DefaultRule("EMP_TAX", rules.EMPLOYEE_TAX, Decimal("30")),
    DefaultRule("PENSION", rules.PENSION, Decimal("6")),
    DefaultRule("MED_INS", rules.MEDICAL_INSURANCE, Decimal("5")),
    DefaultRule("OTHER", rules.OTHER, Decimal("5")),
    DefaultRule("HOUSING", rules.HOUSING, Decimal("14")),
    DefaultRule("TRANSPORT", rules.TRANSPORT, Decimal("14")),
)


class DeductionService:
    """Create, update and look up deduction rules; supply rates to payroll."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._deductions = DeductionRepository(session)

    def rates(self) -> dict[str, Decimal]:
        """Map every rule name to its percentage."""

        return {
            deduction.name: to_decimal(deduction.percentage)
            for deduction in self._deductions.list_all()
        }

    def seed_defaults(self) -> list[Deduction]:
        """Create the default rules whose names are missing; never overwrite."""

        LOGGER.info("Initializing default deductions")
        created: list[Deduction] = []
        for rule in DEFAULT_RULES:
            if self._deductions.exists_by_name(rule.name):
                continue
            if self._deductions.exists_by_code(rule.code):
                LOGGER.warning(
                    "Cannot seed %s: code %s is taken by another rule", rule.name, rule.code
                )
                continue
            created.append(
                self._deductions.add(
                    Deduction(code=rule.code, name=rule.name, percentage=rule.percentage)
                )
            )
            LOGGER.info("Created default %s rule at %s%%", rule.name, rule.percentage)
        self._commit()
        return created

    def list_all(self) -> list[Deduction]:
        return self._deductions.list_all()

    def get(self, deduction_id: int) -> Deduction:
        deduction = self._deductions.get(deduction_id)
        if deduction is None:
            raise NotFoundError("Deduction", deduction_id)
        return deduction

    def get_by_code(self, code: str) -> Deduction:
        deduction = self._deductions.get_by_code(code)
        if deduction is None:
            raise NotFoundError("Deduction with code", code)
        return deduction

    def get_by_name(self, name: str) -> Deduction:
        deduction = self._deductions.get_by_name(name)
        if deduction is None:
            raise NotFoundError("Deduction with name", name)
        return deduction

    def create(self, *, code: str, name: str, percentage: Decimal) -> Deduction:
        LOGGER.info("Creating deduction with code %s", code)
        percentage = self._validated_percentage(percentage)
        if self._deductions.exists_by_code(code):
            raise ValidationError(f"Deduction with code {code} already exists", field="code")
        if self._deductions.exists_by_name(name):
            raise ValidationError(f"Deduction with name {name} already exists", field="name")

        deduction = self._deductions.add(Deduction(code=code, name=name, percentage=percentage))
        self._commit()
        LOGGER.info("Deduction created with id %s", deduction.id)
        return deduction

    def update(self, deduction_id: int, *, code: str, name: str, percentage: Decimal) -> Deduction:
        LOGGER.info("Updating deduction %s", deduction_id)
        deduction = self.get(deduction_id)
        percentage = self._validated_percentage(percentage)
        if deduction.code != code and self._deductions.exists_by_code(code):
            raise ValidationError(f"Deduction with code {code} already exists", field="code")
        if deduction.name != name and self._deductions.exists_by_name(name):
            raise ValidationError(f"Deduction with name {name} already exists", field="name")

        deduction.code = code
        deduction.name = name
        deduction.percentage = percentage
        self._commit()
        return deduction

    def delete(self, deduction_id: int) -> None:
        deduction = self.get(deduction_id)
        self._deductions.delete(deduction)
        self._commit()
        LOGGER.info("Deduction %s deleted", deduction_id)

    @staticmethod
    def _validated_percentage(value: Decimal) -> Decimal:
        percentage = to_decimal(value)
        if not percentage.is_finite():
            raise ValidationError(
                f"Percentage must be a number, got {percentage}", field="percentage"
            )
        if not _MIN_PERCENTAGE <= percentage <= _MAX_PERCENTAGE:
            raise ValidationError(
                f"Percentage must be between 0 and 100, got {percentage}", field="percentage"
            )
        if percentage.quantize(_PERCENTAGE_STEP) != percentage:
            raise ValidationError(
                f"Percentage allows at most two decimal places, got {percentage}",
                field="percentage",
            )
        return percentage

    def _commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise ValidationError("Deduction code and name must be unique") from exc

"""Payroll runs and the payslip approval lifecycle."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_payroll.core.errors import MissingDeductionsError, NotFoundError
from erp_payroll.core.formatting import to_decimal
from erp_payroll.core.logger import get_logger, log_context, timeit
from erp_payroll.domain.payslip import PayslipAmounts, compute_payslip, missing_rules
from erp_payroll.domain.period import Period
from erp_payroll.models import Employee, PaySlip, SlipStatus
from erp_payroll.repositories import EmployeeRepository, PaySlipRepository

from .deductions import DeductionService

LOGGER = get_logger(__name__)


class SkipReason(str, Enum):
    """Why an active employee received no new payslip in a run."""

    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    NO_ACTIVE_EMPLOYMENT = "NO_ACTIVE_EMPLOYMENT"
    NEGATIVE_NET = "NEGATIVE_NET"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class SkippedEmployee:
    employee_id: int
    employee_code: str
    reason: SkipReason
    detail: str | None = None


@dataclass(slots=True)
class PayrollRunResult:
    """Payslips created by one run plus the employees it left out."""

    period: Period
    payslips: list[PaySlip] = field(default_factory=list)
    skipped: list[SkippedEmployee] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.payslips)

    def skipped_for(self, reason: SkipReason) -> list[SkippedEmployee]:
        return [entry for entry in self.skipped if entry.reason is reason]


@dataclass(frozen=True, slots=True)
class PaySlipView:
    """A payslip together with the display name of its employee."""

    payslip: PaySlip
    employee_name: str


class PayrollService:
    """Compute payslips for a period and move them through approval."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._employees = EmployeeRepository(session)
        self._payslips = PaySlipRepository(session)
        self._deductions = DeductionService(session)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------
    def process(self, period: Period) -> PayrollRunResult:
        """Create a ``PENDING`` payslip for every eligible active employee.

        Raises ``MissingDeductionsError`` before touching anything when the
        required rules are not configured. Every other problem is confined to
        the employee it concerns: that employee is reported in
        ``PayrollRunResult.skipped`` and the run carries on.
        """

        LOGGER.info("Processing payroll for %s", period)
        employees = self._employees.list_active_employees()
        LOGGER.info("Found %d active employees", len(employees))

        rates = self._deductions.rates()
        missing = missing_rules(rates)
        if missing:
            raise MissingDeductionsError(missing)

        result = PayrollRunResult(period=period)
        with log_context.scope(period=period.key), timeit(
            f"Payroll run {period}", logger=LOGGER, unit="employees", total=len(employees)
        ) as timer:
            for employee in employees:
                with log_context.scope(employee=employee.code):
                    self._process_employee(employee, period, rates, result)
                timer.add()

        LOGGER.info(
            "Payroll processing completed for %s: %d created, %d skipped",
            period,
            result.created_count,
            len(result.skipped),
        )
        return result

    def _process_employee(
        self,
        employee: Employee,
        period: Period,
        rates: dict[str, Decimal],
        result: PayrollRunResult,
    ) -> None:
        # Plain attribute copies; a rollback below expires ``employee``.
        employee_id, employee_code = employee.id, employee.code

        def _skip(reason: SkipReason, detail: str | None = None) -> None:
            result.skipped.append(SkippedEmployee(employee_id, employee_code, reason, detail))

        if self._payslips.exists(employee_id, period):
            LOGGER.info("Employee %s already has a pay slip for %s", employee_code, period)
            _skip(SkipReason.ALREADY_PROCESSED)
            return

        employments = self._employees.list_active_employment(employee_id)
        if not employments:
            LOGGER.warning("Employee %s has no active employment", employee_code)
            _skip(SkipReason.NO_ACTIVE_EMPLOYMENT)
            return
        if len(employments) > 1:
            LOGGER.warning(
                "Employee %s has %d active employments; using %s",
                employee_code,
                len(employments),
                employments[0].code,
            )

        amounts = compute_payslip(to_decimal(employments[0].base_salary), rates)
        if amounts.net_salary < 0:
            LOGGER.warning(
                "Net salary for employee %s is negative (%s), skipping",
                employee_code,
                amounts.net_salary,
            )
            _skip(SkipReason.NEGATIVE_NET, str(amounts.net_salary))
            return

        payslip = self._build_payslip(employee_id, period, amounts)
        try:
            self._payslips.add(payslip)
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            LOGGER.warning(
                "Pay slip for employee %s and %s was created concurrently", employee_code, period
            )
            _skip(SkipReason.ALREADY_PROCESSED, "concurrent insert")
            return
        except SQLAlchemyError as exc:
            self._session.rollback()
            LOGGER.exception("Failed to store pay slip for employee %s", employee_code)
            _skip(SkipReason.FAILED, str(exc))
            return

        result.payslips.append(payslip)
        LOGGER.info("Generated pay slip for employee %s for %s", employee_code, period)

    @staticmethod
    def _build_payslip(employee_id: int, period: Period, amounts: PayslipAmounts) -> PaySlip:
        return PaySlip(
            employee_id=employee_id,
            period=period,
            house_amount=amounts.house_amount,
            transport_amount=amounts.transport_amount,
            employee_tax_amount=amounts.employee_tax_amount,
            pension_amount=amounts.pension_amount,
            medical_insurance_amount=amounts.medical_insurance_amount,
            other_tax_amount=amounts.other_tax_amount,
            gross_salary=amounts.gross_salary,
            net_salary=amounts.net_salary,
            status=SlipStatus.PENDING,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def approve(self, period: Period) -> list[PaySlip]:
        """Move every ``PENDING`` payslip of ``period`` to ``PAID`` in one transaction."""

        LOGGER.info("Approving payroll for %s", period)
        pending = self._payslips.list_for_period(period, SlipStatus.PENDING, for_update=True)
        for payslip in pending:
            payslip.status = SlipStatus.PAID
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        LOGGER.info("Payroll approval completed for %s: %d approved", period, len(pending))
        return pending

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_for_period(self, period: Period) -> list[PaySlipView]:
        return [
            PaySlipView(payslip, employee.full_name)
            for payslip, employee in self._payslips.list_with_employee(period)
        ]

    def get_payslip(self, payslip_id: int) -> PaySlipView:
        payslip = self._payslips.get(payslip_id)
        if payslip is None:
            raise NotFoundError("Pay slip", payslip_id)
        return self._view(payslip)

    def get_own_payslips(self, caller_employee_id: int) -> list[PaySlipView]:
        employee = self._require_employee(caller_employee_id)
        return [
            PaySlipView(payslip, employee.full_name)
            for payslip in self._payslips.list_for_employee(employee.id)
        ]

    def get_own_payslip(self, caller_employee_id: int, period: Period) -> PaySlipView:
        employee = self._require_employee(caller_employee_id)
        payslip = self._payslips.get_for_employee(employee.id, period)
        if payslip is None:
            raise NotFoundError("Pay slip for", period.key)
        return PaySlipView(payslip, employee.full_name)

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _view(self, payslip: PaySlip) -> PaySlipView:
        employee = self._require_employee(payslip.employee_id)
        return PaySlipView(payslip, employee.full_name)

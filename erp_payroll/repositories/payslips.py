"""Persistence and queries for payslips."""
from __future__ import annotations

from sqlalchemy import select

from erp_payroll.domain.period import Period
from erp_payroll.models import Employee, PaySlip, SlipStatus

from .base import BaseRepository


class PaySlipRepository(BaseRepository[PaySlip]):
    model = PaySlip

    def exists(self, employee_id: int, period: Period) -> bool:
        return self._exists_where(PaySlip.employee_id == employee_id, PaySlip.period == period)

    def get_for_employee(self, employee_id: int, period: Period) -> PaySlip | None:
        return self._first_where(PaySlip.employee_id == employee_id, PaySlip.period == period)

    def list_for_employee(self, employee_id: int) -> list[PaySlip]:
        statement = (
            select(PaySlip)
            .where(PaySlip.employee_id == employee_id)
            .order_by(PaySlip.period.desc(), PaySlip.id.desc())
        )
        return list(self._session.execute(statement).scalars())

    def list_for_period(
        self,
        period: Period,
        status: SlipStatus | None = None,
        *,
        for_update: bool = False,
    ) -> list[PaySlip]:
        statement = select(PaySlip).where(PaySlip.period == period)
        if status is not None:
            statement = statement.where(PaySlip.status == status)
        statement = statement.order_by(PaySlip.id.asc())
        if for_update:
            statement = statement.with_for_update()
        return list(self._session.execute(statement).scalars())

    def list_with_employee(
        self, period: Period, status: SlipStatus | None = None
    ) -> list[tuple[PaySlip, Employee]]:
        """Payslips of ``period`` paired with the employee they belong to."""

        statement = (
            select(PaySlip, Employee)
            .join(Employee, Employee.id == PaySlip.employee_id)
            .where(PaySlip.period == period)
        )
        if status is not None:
            statement = statement.where(PaySlip.status == status)
        statement = statement.order_by(PaySlip.id.asc())
        return [(row[0], row[1]) for row in self._session.execute(statement)]

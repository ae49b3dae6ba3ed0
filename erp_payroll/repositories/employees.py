"""Read access to employees and their employment records."""
from __future__ import annotations

from sqlalchemy import select

from erp_payroll.models import Employee, EmployeeStatus, Employment, EmploymentStatus

from .base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    def get_by_email(self, email: str) -> Employee | None:
        return self._first_where(Employee.email == email)

    def list_active_employees(self) -> list[Employee]:
        statement = (
            select(Employee)
            .where(Employee.status == EmployeeStatus.ACTIVE)
            .order_by(Employee.id.asc())
        )
        return list(self._session.execute(statement).scalars())

    def list_active_employment(self, employee_id: int) -> list[Employment]:
        """Active employment records for one employee, oldest first."""

        statement = (
            select(Employment)
            .where(
                Employment.employee_id == employee_id,
                Employment.status == EmploymentStatus.ACTIVE,
            )
            .order_by(Employment.id.asc())
        )
        return list(self._session.execute(statement).scalars())

    def get_many(self, employee_ids: set[int]) -> dict[int, Employee]:
        if not employee_ids:
            return {}
        statement = select(Employee).where(Employee.id.in_(employee_ids))
        return {employee.id: employee for employee in self._session.execute(statement).scalars()}

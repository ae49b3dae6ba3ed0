"""Shared fixtures: in-memory database, logging and a recording mail sender."""
from __future__ import annotations

import os
from datetime import date
from decimal import Decimal
from itertools import count

# Keep test runs from writing log files or reaching a real database.
os.environ["LOG_DIR"] = ""
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from erp_payroll.core.log import init_logging, shutdown_logging
from erp_payroll.models import (
    Base,
    Employee,
    EmployeeStatus,
    Employment,
    EmploymentStatus,
    Role,
)
from erp_payroll.services import DeductionService


@pytest.fixture(scope="session", autouse=True)
def _logging():
    init_logging(log_dir=None, queue=False, level="DEBUG", rich_tracebacks=False)
    yield
    shutdown_logging()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory) -> Session:
    """Provide an in-memory database session for each test."""

    with session_factory() as session:
        yield session


class RecordingMailSender:
    """Mail collaborator that records deliveries and fails for chosen addresses."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.failing: set[str] = set()

    def send(self, to_address: str, subject: str, body: str) -> None:
        if to_address in self.failing:
            raise ConnectionError(f"mailbox {to_address} unavailable")
        self.sent.append((to_address, subject, body))

    def recipients(self) -> list[str]:
        return [to_address for to_address, _, _ in self.sent]


@pytest.fixture()
def mail_sender() -> RecordingMailSender:
    return RecordingMailSender()


class PayrollFactory:
    """Create employees, employment records and deduction rules."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._sequence = count(1)

    def employee(
        self,
        first_name: str = "Alice",
        last_name: str = "Uwase",
        *,
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
        role: Role = Role.EMPLOYEE,
        code: str | None = None,
        email: str | None = None,
    ) -> Employee:
        number = next(self._sequence)
        employee = Employee(
            code=code or f"EMP{number:03d}",
            first_name=first_name,
            last_name=last_name,
            email=email or f"{first_name.lower()}.{number}@example.com",
            status=status,
            role=role,
        )
        self._session.add(employee)
        self._session.commit()
        return employee

    def employment(
        self,
        employee: Employee,
        base_salary: Decimal | str = "500000",
        *,
        status: EmploymentStatus = EmploymentStatus.ACTIVE,
    ) -> Employment:
        number = next(self._sequence)
        employment = Employment(
            code=f"EMPL{number:03d}",
            employee_id=employee.id,
            department="Finance",
            position="Accountant",
            base_salary=Decimal(base_salary),
            joining_date=date(2020, 1, 1),
            status=status,
        )
        self._session.add(employment)
        self._session.commit()
        return employment

    def paid_employee(self, first_name: str = "Alice", base_salary: str = "500000") -> Employee:
        employee = self.employee(first_name)
        self.employment(employee, base_salary)
        return employee

    def default_deductions(self) -> None:
        DeductionService(self._session).seed_defaults()


@pytest.fixture()
def factory(session) -> PayrollFactory:
    return PayrollFactory(session)

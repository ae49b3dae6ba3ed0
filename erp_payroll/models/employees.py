"""Employee and employment records read by the payroll core."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, Enum as SQLEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, MONEY, Base


class EmployeeStatus(str, Enum):
    """Account status of an employee."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    DISABLED = "DISABLED"


class EmploymentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Role(str, Enum):
    """Roles an authenticated caller may hold."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class Employee(Base):
    """A member of the workforce. Maintained outside the payroll core."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    status: Mapped[EmployeeStatus] = mapped_column(
        SQLEnum(EmployeeStatus, native_enum=False, length=16),
        nullable=False,
        default=EmployeeStatus.DISABLED,
        index=True,
    )
    role: Mapped[Role] = mapped_column(
        SQLEnum(Role, native_enum=False, length=16),
        nullable=False,
        default=Role.EMPLOYEE,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Employment(Base):
    """An employee's role record carrying the base salary."""

    __tablename__ = "employments"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False, index=True)
    department: Mapped[str] = mapped_column(String(120), nullable=False)
    position: Mapped[str] = mapped_column(String(120), nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[EmploymentStatus] = mapped_column(
        SQLEnum(EmploymentStatus, native_enum=False, length=16),
        nullable=False,
        default=EmploymentStatus.ACTIVE,
    )

"""Shared FastAPI dependencies for the payroll routers."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from erp_payroll.core.config import NotificationSettings, get_settings
from erp_payroll.core.errors import AuthenticationError
from erp_payroll.core.security import AuthenticatedUser
from erp_payroll.db.session import get_sessionmaker
from erp_payroll.repositories import EmployeeRepository


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Session factory for the configured database, created on first request."""

    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session for the request lifecycle."""

    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_notification_settings() -> NotificationSettings:
    return get_settings().notifications


def resolve_caller_employee_id(user: AuthenticatedUser, session: Session) -> int:
    """Employee id from the token, or from the employee whose email is the token subject."""

    if user.employee_id is not None:
        return user.employee_id
    employee = EmployeeRepository(session).get_by_email(user.username)
    if employee is None:
        raise AuthenticationError("Token is not linked to an employee")
    return employee.id

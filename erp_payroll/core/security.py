"""JWT bearer authentication and the role/action permission table."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable

import jwt
from fastapi import Depends, Request
from jwt import ExpiredSignatureError, InvalidTokenError

from erp_payroll.core.config import AuthSettings, get_settings
from erp_payroll.core.errors import AuthenticationError, AuthorizationError
from erp_payroll.core.logger import get_logger
from erp_payroll.models.employees import Role

LOGGER = get_logger(__name__)

PAYROLL_PROCESS = "payroll.process"
PAYROLL_APPROVE = "payroll.approve"
PAYROLL_VIEW = "payroll.view"
PAYSLIP_VIEW_OWN = "payslip.view_own"
NOTIFICATION_RESEND = "notification.resend"
NOTIFICATION_VIEW = "notification.view"
DEDUCTION_MANAGE = "deduction.manage"
DEDUCTION_VIEW = "deduction.view"

ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.ADMIN: frozenset(
        {
            PAYROLL_APPROVE,
            PAYROLL_VIEW,
            NOTIFICATION_RESEND,
            NOTIFICATION_VIEW,
            DEDUCTION_MANAGE,
            DEDUCTION_VIEW,
        }
    ),
    Role.MANAGER: frozenset(
        {
            PAYROLL_PROCESS,
            PAYROLL_VIEW,
            NOTIFICATION_VIEW,
            DEDUCTION_MANAGE,
            DEDUCTION_VIEW,
        }
    ),
    Role.EMPLOYEE: frozenset({PAYSLIP_VIEW_OWN, DEDUCTION_VIEW}),
}


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Representation of the authenticated principal."""

    username: str
    role: Role
    employee_id: int | None = None
    # Set only on the stand-in user issued while authentication is disabled.
    unrestricted: bool = False


def authorize(user: AuthenticatedUser, action: str) -> AuthenticatedUser:
    """Return ``user`` when its role grants ``action``, else raise ``AuthorizationError``."""

    if user.unrestricted:
        return user
    if action not in ROLE_PERMISSIONS.get(user.role, frozenset()):
        LOGGER.info("Denied %s to %s (%s)", action, user.username, user.role.value)
        raise AuthorizationError(user.role.value, action)
    return user


class SecurityProvider:
    """Issue and verify JWT access tokens."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def token_ttl_seconds(self) -> int:
        """Return the access token lifetime in seconds."""

        return int(self._settings.access_token_expire_minutes * 60)

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled

    def default_admin_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(username="admin", role=Role.ADMIN, unrestricted=True)

    def create_access_token(self, user: AuthenticatedUser) -> str:
        """Create a signed JWT for the authenticated user."""

        now = datetime.now(tz=timezone.utc)
        expires = now + timedelta(minutes=self._settings.access_token_expire_minutes)
        payload: dict[str, object] = {
            "sub": user.username,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        if user.employee_id is not None:
            payload["employee_id"] = user.employee_id
        return jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Decode a JWT and return the corresponding ``AuthenticatedUser``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        username = payload.get("sub")
        role = payload.get("role")
        if not isinstance(username, str) or not isinstance(role, str):
            raise AuthenticationError("Token payload missing required claims")
        try:
            resolved_role = Role(role)
        except ValueError as exc:
            raise AuthenticationError(f"Unknown role {role}") from exc

        employee_id = payload.get("employee_id")
        resolved_employee: int | None = None
        if employee_id is not None:
            try:
                resolved_employee = int(employee_id)
            except (TypeError, ValueError) as exc:
                raise AuthenticationError("Token employee_id invalid") from exc

        return AuthenticatedUser(
            username=username, role=resolved_role, employee_id=resolved_employee
        )


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    """Return a cached security provider instance."""

    return SecurityProvider(get_settings().auth)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must use the Bearer scheme")
    return token.strip()


def get_authenticated_user(
    request: Request,
    security: SecurityProvider = Depends(get_security_provider),
) -> AuthenticatedUser:
    """Resolve the caller from the bearer token on the request."""

    if not security.is_enabled:
        return security.default_admin_user()

    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError("Login required")
    return security.decode_token(token)


def require_action(action: str) -> Callable[..., AuthenticatedUser]:
    """Build a dependency that admits only roles granted ``action``."""

    def _dependency(
        user: AuthenticatedUser = Depends(get_authenticated_user),
    ) -> AuthenticatedUser:
        return authorize(user, action)

    _dependency.__name__ = f"require_{action.replace('.', '_')}"
    return _dependency


__all__ = [
    "AuthenticatedUser",
    "DEDUCTION_MANAGE",
    "DEDUCTION_VIEW",
    "NOTIFICATION_RESEND",
    "NOTIFICATION_VIEW",
    "PAYROLL_APPROVE",
    "PAYROLL_PROCESS",
    "PAYROLL_VIEW",
    "PAYSLIP_VIEW_OWN",
    "ROLE_PERMISSIONS",
    "SecurityProvider",
    "authorize",
    "get_authenticated_user",
    "get_security_provider",
    "require_action",
]

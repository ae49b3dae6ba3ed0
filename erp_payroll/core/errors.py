"""Typed errors raised by the payroll core.

Each error carries a machine readable ``code`` and the HTTP status the API
layer renders it with. Per-employee skips and mail delivery failures are not
errors: they are recorded in run results and message state instead.
"""
from __future__ import annotations

from typing import Any


class PayrollError(Exception):
    """Base class for every error surfaced to callers of the payroll core."""

    code: str = "PAYROLL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.details:
            payload["context"] = self.details
        return payload


class ConfigurationError(PayrollError):
    """The system is not configured well enough to run payroll."""

    code = "CONFIGURATION_ERROR"
    status_code = 409


class MissingDeductionsError(ConfigurationError):
    """One or more of the required deduction rules does not exist."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = sorted(missing)
        super().__init__(
            "Required deductions are not configured: " + ", ".join(self.missing),
            missing=self.missing,
        )


class ValidationError(PayrollError):
    """Input was rejected before any mutation took place."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(PayrollError):
    """A lookup by id, code, name or period matched nothing."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found", entity=entity, key=str(key))


class AuthenticationError(PayrollError):
    """Raised when authentication or token validation fails."""

    code = "AUTHENTICATION_ERROR"
    status_code = 401


class AuthorizationError(PayrollError):
    """The caller's role does not grant the requested action."""

    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, role: str, action: str) -> None:
        self.role = role
        self.action = action
        super().__init__(f"Role {role} is not allowed to perform {action}", role=role, action=action)


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "MissingDeductionsError",
    "NotFoundError",
    "PayrollError",
    "ValidationError",
]

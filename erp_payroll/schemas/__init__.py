"""Pydantic schemas for request and response payloads."""

from .deductions import DeductionRequest, DeductionResponse
from .messages import MessageResponse, ResendResponse
from .payroll import (
    ApprovalResponse,
    PayrollProcessRequest,
    PayrollRunResponse,
    PaySlipResponse,
    SkippedEmployeeResponse,
)

__all__ = [
    "ApprovalResponse",
    "DeductionRequest",
    "DeductionResponse",
    "MessageResponse",
    "PayrollProcessRequest",
    "PayrollRunResponse",
    "PaySlipResponse",
    "ResendResponse",
    "SkippedEmployeeResponse",
]

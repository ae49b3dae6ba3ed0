"""Schema definitions for payroll runs and payslips."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

from erp_payroll.domain.period import Period
from erp_payroll.models import SlipStatus

from .messages import MessageResponse


class PayrollProcessRequest(BaseModel):
    """Period to run payroll for."""

    year: int = Field(ge=2000, le=9999)
    month: int = Field(ge=1, le=12)

    def to_period(self) -> Period:
        return Period.of(self.year, self.month)


class PaySlipResponse(BaseModel):
    """Salary breakdown returned for one payslip."""

    id: int
    employee_id: int
    employee_name: str | None = None
    period: str
    house_amount: Decimal
    transport_amount: Decimal
    employee_tax_amount: Decimal
    pension_amount: Decimal
    medical_insurance_amount: Decimal
    other_tax_amount: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    status: SlipStatus
    created_at: datetime

    @field_serializer(
        "house_amount",
        "transport_amount",
        "employee_tax_amount",
        "pension_amount",
        "medical_insurance_amount",
        "other_tax_amount",
        "gross_salary",
        "net_salary",
    )
    def _serialize_decimal(self, value: Decimal) -> str:
        return str(value)

    @classmethod
    def from_model(cls, payslip, employee_name: str | None = None) -> "PaySlipResponse":
        return cls(
            id=payslip.id,
            employee_id=payslip.employee_id,
            employee_name=employee_name,
            period=payslip.period.key,
            house_amount=payslip.house_amount,
            transport_amount=payslip.transport_amount,
            employee_tax_amount=payslip.employee_tax_amount,
            pension_amount=payslip.pension_amount,
            medical_insurance_amount=payslip.medical_insurance_amount,
            other_tax_amount=payslip.other_tax_amount,
            gross_salary=payslip.gross_salary,
            net_salary=payslip.net_salary,
            status=payslip.status,
            created_at=payslip.created_at,
        )

    @classmethod
    def from_view(cls, view) -> "PaySlipResponse":
        return cls.from_model(view.payslip, view.employee_name)


class SkippedEmployeeResponse(BaseModel):
    employee_id: int
    employee_code: str
    reason: str
    detail: str | None = None


class PayrollRunResponse(BaseModel):
    """Result of one payroll run."""

    period: str
    created: int
    payslips: list[PaySlipResponse]
    skipped: list[SkippedEmployeeResponse]

    @classmethod
    def from_result(cls, result) -> "PayrollRunResponse":
        return cls(
            period=result.period.key,
            created=result.created_count,
            payslips=[PaySlipResponse.from_model(payslip) for payslip in result.payslips],
            skipped=[
                SkippedEmployeeResponse(
                    employee_id=entry.employee_id,
                    employee_code=entry.employee_code,
                    reason=entry.reason.value,
                    detail=entry.detail,
                )
                for entry in result.skipped
            ],
        )


class ApprovalResponse(BaseModel):
    """Payslips moved to ``PAID`` and the notifications that followed."""

    period: str
    approved: list[PaySlipResponse]
    notifications: list[MessageResponse]

"""Schema definitions for deduction rules."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class DeductionRequest(BaseModel):
    """Payload used to create or replace a deduction rule."""

    code: str = Field(min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_\-]+$")
    name: str = Field(min_length=1, max_length=50)
    percentage: Decimal = Field(ge=0, le=100, max_digits=5, decimal_places=2)


class DeductionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    percentage: Decimal

    @field_serializer("percentage")
    def _serialize_percentage(self, value: Decimal) -> str:
        return str(value)

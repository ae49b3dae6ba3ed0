"""Routes managing the deduction registry."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from erp_payroll.core.security import (
    DEDUCTION_MANAGE,
    DEDUCTION_VIEW,
    AuthenticatedUser,
    require_action,
)
from erp_payroll.routers.dependencies import get_db_session
from erp_payroll.schemas import DeductionRequest, DeductionResponse
from erp_payroll.services import DeductionService

router = APIRouter(prefix="/deductions", tags=["deductions"])


def get_deduction_service(session: Session = Depends(get_db_session)) -> DeductionService:
    return DeductionService(session)


@router.get("", response_model=list[DeductionResponse])
def list_deductions(
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_VIEW)),
    service: DeductionService = Depends(get_deduction_service),
) -> list[DeductionResponse]:
    return [DeductionResponse.model_validate(item) for item in service.list_all()]


@router.post("", response_model=DeductionResponse, status_code=status.HTTP_201_CREATED)
def create_deduction(
    request: DeductionRequest,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> DeductionResponse:
    deduction = service.create(code=request.code, name=request.name, percentage=request.percentage)
    return DeductionResponse.model_validate(deduction)


@router.post("/initialize", response_model=list[DeductionResponse])
def initialize_deductions(
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> list[DeductionResponse]:
    return [DeductionResponse.model_validate(item) for item in service.seed_defaults()]


@router.get("/code/{code}", response_model=DeductionResponse)
def deduction_by_code(
    code: str,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> DeductionResponse:
    return DeductionResponse.model_validate(service.get_by_code(code))


@router.get("/name/{name}", response_model=DeductionResponse)
def deduction_by_name(
    name: str,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> DeductionResponse:
    return DeductionResponse.model_validate(service.get_by_name(name))


@router.get("/{deduction_id}", response_model=DeductionResponse)
def deduction_by_id(
    deduction_id: int,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> DeductionResponse:
    return DeductionResponse.model_validate(service.get(deduction_id))


@router.put("/{deduction_id}", response_model=DeductionResponse)
def update_deduction(
    deduction_id: int,
    request: DeductionRequest,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> DeductionResponse:
    deduction = service.update(
        deduction_id, code=request.code, name=request.name, percentage=request.percentage
    )
    return DeductionResponse.model_validate(deduction)


@router.delete("/{deduction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deduction(
    deduction_id: int,
    _: AuthenticatedUser = Depends(require_action(DEDUCTION_MANAGE)),
    service: DeductionService = Depends(get_deduction_service),
) -> Response:
    service.delete(deduction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Routes for payroll runs, approval, payslips and notifications."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from erp_payroll.core.config import NotificationSettings
from erp_payroll.core.logger import get_logger
from erp_payroll.core.security import (
    NOTIFICATION_RESEND,
    NOTIFICATION_VIEW,
    PAYROLL_APPROVE,
    PAYROLL_PROCESS,
    PAYROLL_VIEW,
    PAYSLIP_VIEW_OWN,
    AuthenticatedUser,
    require_action,
)
from erp_payroll.domain.period import Period
from erp_payroll.routers.dependencies import (
    get_db_session,
    get_notification_settings,
    resolve_caller_employee_id,
)
from erp_payroll.schemas import (
    ApprovalResponse,
    MessageResponse,
    PayrollProcessRequest,
    PayrollRunResponse,
    PaySlipResponse,
    ResendResponse,
)
from erp_payroll.services import MailSender, NotificationService, PayrollService, get_mail_sender

router = APIRouter(prefix="/payroll", tags=["payroll"])
LOGGER = get_logger(__name__)


def get_payroll_service(session: Session = Depends(get_db_session)) -> PayrollService:
    """Return a service instance per request."""

    return PayrollService(session)


def get_notification_service(
    session: Session = Depends(get_db_session),
    mail_sender: MailSender = Depends(get_mail_sender),
    settings: NotificationSettings = Depends(get_notification_settings),
) -> NotificationService:
    return NotificationService(session, mail_sender, settings)


@router.post("/process", response_model=PayrollRunResponse, status_code=status.HTTP_201_CREATED)
def process_payroll(
    request: PayrollProcessRequest,
    user: AuthenticatedUser = Depends(require_action(PAYROLL_PROCESS)),
    service: PayrollService = Depends(get_payroll_service),
) -> PayrollRunResponse:
    period = request.to_period()
    LOGGER.info("Payroll run for %s requested by %s", period, user.username)
    return PayrollRunResponse.from_result(service.process(period))


@router.patch("/approve/{year}/{month}", response_model=ApprovalResponse)
def approve_payroll(
    year: int,
    month: int,
    user: AuthenticatedUser = Depends(require_action(PAYROLL_APPROVE)),
    service: PayrollService = Depends(get_payroll_service),
    notifications: NotificationService = Depends(get_notification_service),
) -> ApprovalResponse:
    period = Period.of(year, month)
    LOGGER.info("Payroll approval for %s requested by %s", period, user.username)
    approved = service.approve(period)
    messages = notifications.notify_approved(period)
    return ApprovalResponse(
        period=period.key,
        approved=[PaySlipResponse.from_model(payslip) for payslip in approved],
        notifications=[MessageResponse.from_model(message) for message in messages],
    )


@router.get("/slips/me", response_model=list[PaySlipResponse])
def my_payslips(
    user: AuthenticatedUser = Depends(require_action(PAYSLIP_VIEW_OWN)),
    service: PayrollService = Depends(get_payroll_service),
    session: Session = Depends(get_db_session),
) -> list[PaySlipResponse]:
    views = service.get_own_payslips(resolve_caller_employee_id(user, session))
    return [PaySlipResponse.from_view(view) for view in views]


@router.get("/slips/me/{year}/{month}", response_model=PaySlipResponse)
def my_payslip(
    year: int,
    month: int,
    user: AuthenticatedUser = Depends(require_action(PAYSLIP_VIEW_OWN)),
    service: PayrollService = Depends(get_payroll_service),
    session: Session = Depends(get_db_session),
) -> PaySlipResponse:
    view = service.get_own_payslip(resolve_caller_employee_id(user, session), Period.of(year, month))
    return PaySlipResponse.from_view(view)


@router.get("/slips/id/{payslip_id}", response_model=PaySlipResponse)
def payslip_by_id(
    payslip_id: int,
    _: AuthenticatedUser = Depends(require_action(PAYROLL_VIEW)),
    service: PayrollService = Depends(get_payroll_service),
) -> PaySlipResponse:
    return PaySlipResponse.from_view(service.get_payslip(payslip_id))


@router.get("/slips/{year}/{month}", response_model=list[PaySlipResponse])
def payslips_for_period(
    year: int,
    month: int,
    _: AuthenticatedUser = Depends(require_action(PAYROLL_VIEW)),
    service: PayrollService = Depends(get_payroll_service),
) -> list[PaySlipResponse]:
    views = service.list_for_period(Period.of(year, month))
    return [PaySlipResponse.from_view(view) for view in views]


@router.post("/notifications/resend", response_model=ResendResponse)
def resend_failed_notifications(
    user: AuthenticatedUser = Depends(require_action(NOTIFICATION_RESEND)),
    notifications: NotificationService = Depends(get_notification_service),
) -> ResendResponse:
    LOGGER.info("Notification retry requested by %s", user.username)
    result = notifications.resend_failed()
    return ResendResponse(
        sent=[MessageResponse.from_model(message) for message in result.sent],
        failed=[MessageResponse.from_model(message) for message in result.failed],
        exhausted=[MessageResponse.from_model(message) for message in result.exhausted],
    )


@router.get("/messages/me", response_model=list[MessageResponse])
def my_messages(
    user: AuthenticatedUser = Depends(require_action(PAYSLIP_VIEW_OWN)),
    notifications: NotificationService = Depends(get_notification_service),
    session: Session = Depends(get_db_session),
) -> list[MessageResponse]:
    messages = notifications.messages_for_employee(resolve_caller_employee_id(user, session))
    return [MessageResponse.from_model(message) for message in messages]


@router.get("/messages/{year}/{month}", response_model=list[MessageResponse])
def messages_for_period(
    year: int,
    month: int,
    _: AuthenticatedUser = Depends(require_action(NOTIFICATION_VIEW)),
    notifications: NotificationService = Depends(get_notification_service),
) -> list[MessageResponse]:
    messages = notifications.messages_for_period(Period.of(year, month))
    return [MessageResponse.from_model(message) for message in messages]

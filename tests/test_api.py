"""HTTP tests for the payroll and deduction routers."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from erp_payroll.core.config import AuthSettings, NotificationSettings
from erp_payroll.core.security import AuthenticatedUser, SecurityProvider, get_security_provider
from erp_payroll.main import create_app
from erp_payroll.models import Role
from erp_payroll.routers.dependencies import get_db_session, get_notification_settings
from erp_payroll.services import get_mail_sender

SECURITY = SecurityProvider(
    AuthSettings(secret_key="test-secret", algorithm="HS256", access_token_expire_minutes=5)
)


def _headers(role: Role, employee_id: int | None = None) -> dict[str, str]:
    token = SECURITY.create_access_token(
        AuthenticatedUser(username=f"{role.value.lower()}@example.com", role=role, employee_id=employee_id)
    )
    return {"Authorization": f"Bearer {token}"}


ADMIN = _headers(Role.ADMIN)
MANAGER = _headers(Role.MANAGER)


@pytest.fixture()
def client(session_factory, mail_sender):
    app = create_app()

    def _session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender
    app.dependency_overrides[get_security_provider] = lambda: SECURITY
    app.dependency_overrides[get_notification_settings] = lambda: NotificationSettings()
    with TestClient(app) as test_client:
        yield test_client


def test_full_payroll_cycle(client: TestClient, factory, mail_sender) -> None:
    alice = factory.paid_employee("Alice", "500000")

    seeded = client.post("/api/v1/deductions/initialize", headers=MANAGER)
    assert seeded.status_code == 200
    assert len(seeded.json()) == 6

    run = client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)
    assert run.status_code == 201
    body = run.json()
    assert body["created"] == 1
    assert body["payslips"][0]["net_salary"].startswith("410000")
    assert body["payslips"][0]["status"] == "PENDING"

    approved = client.patch("/api/v1/payroll/approve/2024/6", headers=ADMIN)
    assert approved.status_code == 200
    payload = approved.json()
    assert [slip["status"] for slip in payload["approved"]] == ["PAID"]
    assert [message["status"] for message in payload["notifications"]] == ["SENT"]
    assert mail_sender.recipients() == [alice.email]

    slips = client.get("/api/v1/payroll/slips/2024/6", headers=ADMIN).json()
    assert slips[0]["employee_name"] == "Alice Uwase"

    by_id = client.get(f"/api/v1/payroll/slips/id/{slips[0]['id']}", headers=MANAGER)
    assert by_id.status_code == 200

    messages = client.get("/api/v1/payroll/messages/2024/6", headers=MANAGER).json()
    assert len(messages) == 1


def test_rerun_returns_skip_report(client: TestClient, factory) -> None:
    factory.default_deductions()
    factory.paid_employee("Alice")
    client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)

    rerun = client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)

    assert rerun.status_code == 201
    assert rerun.json()["created"] == 0
    assert rerun.json()["skipped"][0]["reason"] == "ALREADY_PROCESSED"


def test_process_without_rules_is_a_conflict(client: TestClient, factory) -> None:
    factory.paid_employee("Alice")

    response = client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)

    assert response.status_code == 409
    assert response.json()["error"] == "CONFIGURATION_ERROR"


@pytest.mark.parametrize("payload", [{"year": 2024, "month": 13}, {"year": 1999, "month": 1}])
def test_process_validates_period(client: TestClient, payload) -> None:
    response = client.post("/api/v1/payroll/process", json=payload, headers=MANAGER)

    assert response.status_code == 422


def test_role_checks(client: TestClient) -> None:
    assert client.post(
        "/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=ADMIN
    ).status_code == 403
    assert client.patch("/api/v1/payroll/approve/2024/6", headers=MANAGER).status_code == 403
    employee = _headers(Role.EMPLOYEE, employee_id=1)
    assert client.get("/api/v1/payroll/slips/2024/6", headers=employee).status_code == 403
    assert client.get("/api/v1/deductions", headers=employee).status_code == 200
    denied = client.post("/api/v1/deductions/initialize", headers=employee)
    assert denied.status_code == 403
    assert denied.json()["error"] == "FORBIDDEN"


def test_missing_or_bad_token_is_unauthorized(client: TestClient) -> None:
    assert client.get("/api/v1/deductions").status_code == 401
    response = client.get("/api/v1/deductions", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


def test_employee_sees_only_own_payslips(client: TestClient, factory) -> None:
    factory.default_deductions()
    alice = factory.paid_employee("Alice")
    factory.paid_employee("Bob")
    client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)
    headers = _headers(Role.EMPLOYEE, employee_id=alice.id)

    mine = client.get("/api/v1/payroll/slips/me", headers=headers).json()
    assert [slip["employee_id"] for slip in mine] == [alice.id]
    one = client.get("/api/v1/payroll/slips/me/2024/6", headers=headers)
    assert one.status_code == 200
    missing = client.get("/api/v1/payroll/slips/me/2024/7", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "NOT_FOUND"


def test_resend_endpoint(client: TestClient, factory, mail_sender) -> None:
    factory.default_deductions()
    alice = factory.paid_employee("Alice")
    mail_sender.failing.add(alice.email)
    client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)
    client.patch("/api/v1/payroll/approve/2024/6", headers=ADMIN)
    mail_sender.failing.clear()

    response = client.post("/api/v1/payroll/notifications/resend", headers=ADMIN)

    assert response.status_code == 200
    assert [message["status"] for message in response.json()["sent"]] == ["SENT"]
    own = client.get(
        "/api/v1/payroll/messages/me", headers=_headers(Role.EMPLOYEE, employee_id=alice.id)
    ).json()
    assert own[0]["attempts"] == 2


def test_deduction_crud(client: TestClient) -> None:
    created = client.post(
        "/api/v1/deductions",
        json={"code": "EMP_TAX", "name": "Employee Tax", "percentage": "30"},
        headers=MANAGER,
    )
    assert created.status_code == 201
    deduction_id = created.json()["id"]
    assert created.json()["percentage"] in {"30", "30.00"}

    duplicate = client.post(
        "/api/v1/deductions",
        json={"code": "EMP_TAX", "name": "Other Tax", "percentage": "10"},
        headers=MANAGER,
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "VALIDATION_ERROR"

    bad_code = client.post(
        "/api/v1/deductions",
        json={"code": "has space", "name": "Spaced", "percentage": "10"},
        headers=MANAGER,
    )
    assert bad_code.status_code == 422

    updated = client.put(
        f"/api/v1/deductions/{deduction_id}",
        json={"code": "EMP_TAX", "name": "Employee Tax", "percentage": "25"},
        headers=ADMIN,
    )
    assert updated.status_code == 200
    assert client.get("/api/v1/deductions/code/EMP_TAX", headers=ADMIN).json()["id"] == deduction_id
    assert client.get("/api/v1/deductions/name/Employee Tax", headers=ADMIN).status_code == 200

    assert client.delete(f"/api/v1/deductions/{deduction_id}", headers=ADMIN).status_code == 204
    assert client.get(f"/api/v1/deductions/{deduction_id}", headers=ADMIN).status_code == 404


def test_employee_resolved_by_token_subject(client: TestClient, factory) -> None:
    factory.default_deductions()
    alice = factory.paid_employee("Alice")
    client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}, headers=MANAGER)
    token = SECURITY.create_access_token(AuthenticatedUser(username=alice.email, role=Role.EMPLOYEE))

    mine = client.get("/api/v1/payroll/slips/me", headers={"Authorization": f"Bearer {token}"})

    assert mine.status_code == 200
    assert [slip["employee_id"] for slip in mine.json()] == [alice.id]
    stranger = SECURITY.create_access_token(
        AuthenticatedUser(username="nobody@example.com", role=Role.EMPLOYEE)
    )
    denied = client.get("/api/v1/payroll/slips/me", headers={"Authorization": f"Bearer {stranger}"})
    assert denied.status_code == 401


def test_disabled_auth_can_run_whole_cycle(client: TestClient, factory, mail_sender) -> None:
    alice = factory.paid_employee("Alice", "500000")
    open_access = SecurityProvider(
        AuthSettings(secret_key="x", algorithm="HS256", access_token_expire_minutes=5, enabled=False)
    )
    client.app.dependency_overrides[get_security_provider] = lambda: open_access

    assert client.post("/api/v1/deductions/initialize").status_code == 200
    assert client.post("/api/v1/payroll/process", json={"year": 2024, "month": 6}).status_code == 201
    assert client.patch("/api/v1/payroll/approve/2024/6").status_code == 200
    assert mail_sender.recipients() == [alice.email]

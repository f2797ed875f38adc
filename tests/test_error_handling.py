"""
Error handling, envelope format and edge case tests.

This test suite covers:
- The shared error envelope for service, validation and HTTP errors
- Status codes carried by each service exception
- The admin key guard
- Unexpected errors mapped to 500
- Users and health routes
- Settings validation of lifecycle thresholds
"""

import pytest
import uuid
from fastapi.testclient import TestClient
from pydantic import ValidationError

from main import app
from app.config import Settings, settings
from app.exceptions import (
    CancellationWindowExpired,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    OrderAlreadyFinalized,
    QuotaExhaustedError,
    ServiceValidationError,
)
from services.user_service import UserService
from test_fixtures import (
    client,
    db_session,
    frozen_clock,
    make_user,
    quick_order_payload,
    unique_email,
)


# =============================================================================
# EXCEPTIONS
# =============================================================================


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (ServiceValidationError(), 400, "SERVICE_VALIDATION_ERROR"),
        (NotFoundError(), 404, "NOT_FOUND"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (ConflictError(), 409, "CONFLICT"),
        (CancellationWindowExpired(), 400, "CANCEL_WINDOW_EXPIRED"),
        (OrderAlreadyFinalized("done"), 400, "ORDER_FINALIZED"),
        (QuotaExhaustedError(), 400, "NO_BOXES_LEFT"),
    ],
)
def test_exception_status_and_code(exc, status, code):
    assert exc.http_status == status
    assert exc.code == code
    assert isinstance(exc, ServiceValidationError)


def test_to_dict_includes_details():
    exc = ServiceValidationError("bad", details={"field": "phone"})
    assert exc.to_dict() == {
        "message": "bad",
        "code": "SERVICE_VALIDATION_ERROR",
        "details": {"field": "phone"},
    }


# =============================================================================
# ENVELOPE
# =============================================================================


def test_not_found_envelope(frozen_clock):
    r = client.get(f"/users/{uuid.uuid4()}")

    assert r.status_code == 404
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert "timestamp" in body


def test_validation_envelope():
    r = client.get("/orders/quick?user_id=not-a-uuid")

    assert r.status_code == 422
    body = r.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert isinstance(body["error"]["details"], list)


def test_unknown_route_envelope():
    r = client.get("/no-such-route")

    assert r.status_code == 404
    assert r.json()["error"]["code"] == "HTTP_404"


def test_unexpected_error_is_500(db_session, monkeypatch):
    def boom(db, user_id):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(UserService, "get_user", staticmethod(boom))
    safe_client = TestClient(app, raise_server_exceptions=False)

    r = safe_client.get(f"/users/{uuid.uuid4()}")

    assert r.status_code == 500
    assert r.json()["error"]["code"] == "INTERNAL_SERVER_ERROR"


def test_request_id_header():
    r = client.get("/health-check")
    assert "X-Request-ID" in r.headers


# =============================================================================
# ADMIN GUARD
# =============================================================================


def test_admin_routes_open_without_key(frozen_clock):
    r = client.get("/admin/orders")
    assert r.status_code == 200
    assert r.json() == {"count": 0, "orders": []}


def test_admin_key_required_when_configured(frozen_clock, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", "s3cret")

    assert client.get("/admin/orders").status_code == 403
    assert client.get("/admin/orders", headers={"X-Admin-Key": "wrong"}).status_code == 403
    assert client.get("/admin/orders", headers={"X-Admin-Key": "s3cret"}).status_code == 200


def test_admin_purge(db_session, frozen_clock):
    user = make_user(db_session)
    order_id = client.post(
        f"/orders/quick?user_id={user.user_id}", json=quick_order_payload()
    ).json()["order_id"]

    r = client.delete(f"/admin/orders/{order_id}")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.delete(f"/admin/orders/{order_id}")
    assert r.status_code == 404


# =============================================================================
# USERS AND HEALTH
# =============================================================================


def test_create_and_get_user():
    email = unique_email("michael.chen")
    r = client.post("/users", json={"email": email, "full_name": "Michael Chen"})

    assert r.status_code == 201
    created = r.json()
    assert created["total_boxes"] == 0
    assert created["is_premium"] is False

    r = client.get(f"/users/{created['user_id']}")
    assert r.status_code == 200
    assert r.json()["email"] == email


def test_duplicate_email_conflict():
    email = unique_email("raj.patel")
    client.post("/users", json={"email": email, "full_name": "Raj Patel"})

    r = client.post("/users", json={"email": email, "full_name": "Raj Patel"})

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"


def test_invalid_email_rejected():
    r = client.post("/users", json={"email": "not-an-email", "full_name": "X"})
    assert r.status_code == 422


def test_health_check():
    r = client.get("/health-check")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "PuttyBox"
    assert body["sweeper_running"] is False


# =============================================================================
# CONFIGURATION
# =============================================================================


def test_default_settings_are_consistent():
    cfg = Settings()
    assert cfg.cancel_window_sec < cfg.quick_deliver_after_sec
    assert cfg.cancel_window_sec < cfg.plan_deliver_after_sec


@pytest.mark.parametrize(
    "overrides",
    [
        {"cancel_window_sec": 300},
        {"cancel_window_sec": 400},
        {"plan_start_after_sec": 60, "plan_deliver_after_sec": 150},
        {"quick_cooking_after_sec": 10},
    ],
)
def test_inconsistent_thresholds_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)

"""
Tests for the subscription box ledger and premium activation.

This test suite covers:
- Box allotment per subscription length and duration parsing
- Consumption clamped at the allotment
- The last-box scenario (29/30 -> 30/30 -> rejected)
- Lazy repair of a missing allotment
- Premium expiry
- Subscription routes
"""

import pytest
from datetime import datetime, timedelta

from app.exceptions import NotFoundError, ServiceValidationError
from repositories import UserRepository
from services.quota_service import (
    BoxQuotaLedger,
    add_months,
    boxes_for_months,
    parse_duration,
)
from test_fixtures import client, db_session, frozen_clock, make_user, T0


# =============================================================================
# PURE HELPERS
# =============================================================================


@pytest.mark.parametrize(
    "raw,months",
    [
        (3, 3),
        ("3", 3),
        ("3m", 3),
        ("6month", 6),
        ("1-month", 1),
        ("6 months", 6),
        ("", None),
        ("monthly", None),
        (0, None),
        (None, None),
    ],
)
def test_parse_duration(raw, months):
    assert parse_duration(raw) == months


def test_boxes_for_months():
    assert boxes_for_months(1) == 30
    assert boxes_for_months(3) == 90
    assert boxes_for_months(6) == 180
    assert boxes_for_months(2) == 60


def test_add_months_clamps_to_month_end():
    assert add_months(datetime(2026, 1, 31, 9, 0), 1) == datetime(2026, 2, 28, 9, 0)
    assert add_months(datetime(2026, 11, 15), 3) == datetime(2027, 2, 15)


# =============================================================================
# LEDGER
# =============================================================================


def test_allocate_resets_delivered(db_session):
    user = make_user(db_session)
    BoxQuotaLedger.allocate(db_session, user.user_id, 30)
    BoxQuotaLedger.consume(db_session, user.user_id)

    quota = BoxQuotaLedger.allocate(db_session, user.user_id, 90)

    assert (quota.total_boxes, quota.delivered_boxes, quota.remaining_boxes) == (90, 0, 90)


@pytest.mark.parametrize("total", [0, -5])
def test_allocate_rejects_non_positive_total(db_session, total):
    user = make_user(db_session)
    with pytest.raises(ServiceValidationError):
        BoxQuotaLedger.allocate(db_session, user.user_id, total)


def test_allocate_unknown_user(db_session):
    import uuid

    with pytest.raises(NotFoundError):
        BoxQuotaLedger.allocate(db_session, uuid.uuid4(), 30)


def test_consume_is_clamped_at_total(db_session):
    user = make_user(db_session)
    BoxQuotaLedger.allocate(db_session, user.user_id, 2)

    assert BoxQuotaLedger.consume(db_session, user.user_id) == (1, 1)
    assert BoxQuotaLedger.consume(db_session, user.user_id) == (2, 0)
    assert BoxQuotaLedger.consume(db_session, user.user_id) == (2, 0)

    quota = BoxQuotaLedger.query(db_session, user.user_id)
    assert quota.delivered_boxes <= quota.total_boxes


def test_last_box_then_exhausted(db_session):
    user = make_user(db_session, premium_months=1)
    user.delivered_boxes = 29
    db_session.commit()

    delivered, remaining = BoxQuotaLedger.consume(db_session, user.user_id)
    assert (delivered, remaining) == (30, 0)

    quota = BoxQuotaLedger.query(db_session, user.user_id)
    assert quota.remaining_boxes == 0


def test_query_repairs_subscriber_without_allotment(db_session):
    user = make_user(db_session)
    user.is_premium = True
    user.premium_plan = "3m"
    user.total_boxes = 0
    db_session.commit()

    quota = BoxQuotaLedger.query(db_session, user.user_id)

    assert quota.total_boxes == 90
    assert UserRepository(db_session).get_by_id(user.user_id).total_boxes == 90


def test_query_repairs_user_without_plan_to_one_month(db_session):
    user = make_user(db_session)
    assert user.premium_plan is None

    quota = BoxQuotaLedger.query(db_session, user.user_id)

    assert (quota.total_boxes, quota.remaining_boxes) == (30, 30)
    assert UserRepository(db_session).get_by_id(user.user_id).total_boxes == 30


def test_query_repairs_negative_allotment(db_session):
    user = make_user(db_session)
    user.total_boxes = -5
    db_session.commit()

    quota = BoxQuotaLedger.query(db_session, user.user_id)

    assert quota.total_boxes == 30


# =============================================================================
# PREMIUM
# =============================================================================


def test_activate_premium_sets_expiry_and_boxes(db_session):
    user = make_user(db_session)

    status = BoxQuotaLedger.activate_premium(db_session, user.user_id, "3 months", T0)

    assert status.is_premium is True
    assert status.premium_plan == "3m"
    assert status.premium_since == T0
    assert status.premium_expiry == datetime(2026, 6, 2, 12, 0, 0)
    assert (status.total_boxes, status.remaining_boxes) == (90, 90)


def test_activate_premium_defaults_to_one_month(db_session):
    user = make_user(db_session)

    status = BoxQuotaLedger.activate_premium(db_session, user.user_id, "soon", T0)

    assert status.total_boxes == 30


def test_expired_premium_is_switched_off(db_session):
    user = make_user(db_session, premium_months=1)

    status = BoxQuotaLedger.premium_status(
        db_session, user.user_id, T0 + timedelta(days=40)
    )

    assert status.is_premium is False
    assert status.remaining_boxes == 0
    assert status.message == "Premium expired"
    db_session.refresh(user)
    assert user.is_premium is False


# =============================================================================
# ROUTES
# =============================================================================


def test_activate_route_and_box_query(db_session, frozen_clock):
    user = make_user(db_session)

    r = client.post(f"/subscriptions/{user.user_id}/activate", json={"duration": "6m"})
    assert r.status_code == 200
    assert r.json()["total_boxes"] == 180

    r = client.get(f"/subscriptions/{user.user_id}/boxes")
    assert r.status_code == 200
    assert r.json() == {"total_boxes": 180, "delivered_boxes": 0, "remaining_boxes": 180}

    r = client.get(f"/subscriptions/{user.user_id}")
    assert r.status_code == 200
    assert r.json()["is_premium"] is True


def test_subscription_routes_unknown_user(frozen_clock):
    import uuid

    r = client.get(f"/subscriptions/{uuid.uuid4()}/boxes")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"

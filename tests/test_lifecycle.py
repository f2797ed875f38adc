"""
Tests for the order lifecycle engine.

This test suite covers:
- Time-derived status for quick and plan orders, including threshold edges
- Terminal statuses never changing
- Monotonicity: a status further along than the clock suggests is kept
- Idempotence of repeated evaluation
- Notification text for transitions
"""

import pytest
from datetime import timedelta
from types import SimpleNamespace
import uuid

from domain.enums import OrderVariant
from services.lifecycle import (
    LifecycleSchedule,
    QUICK_SEQUENCE,
    compute_status,
    statuses_for,
    transition_message,
)
from test_fixtures import T0


def at(seconds):
    return T0 + timedelta(seconds=seconds)


@pytest.mark.parametrize(
    "elapsed,expected",
    [
        (0, "pending"),
        (19, "pending"),
        (20, "confirmed"),
        (59, "confirmed"),
        (60, "cooking"),
        (239, "cooking"),
        (240, "out for delivery"),
        (299, "out for delivery"),
        (300, "delivered"),
        (3600, "delivered"),
    ],
)
def test_quick_order_timeline(elapsed, expected):
    assert compute_status(OrderVariant.QUICK, T0, "pending", at(elapsed)) == expected


@pytest.mark.parametrize(
    "elapsed,expected",
    [
        (0, "scheduled"),
        (119, "scheduled"),
        (120, "in-progress"),
        (299, "in-progress"),
        (300, "delivered"),
    ],
)
def test_plan_order_timeline(elapsed, expected):
    assert compute_status(OrderVariant.PLAN, T0, "scheduled", at(elapsed)) == expected


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_terminal_status_is_never_changed(terminal):
    assert compute_status(OrderVariant.QUICK, T0, terminal, at(0)) == terminal
    assert compute_status(OrderVariant.PLAN, T0, terminal, at(10_000)) == terminal


def test_status_never_moves_backwards():
    # Stored status is ahead of what the clock implies
    assert compute_status(OrderVariant.QUICK, T0, "cooking", at(5)) == "cooking"
    assert compute_status(OrderVariant.PLAN, T0, "in-progress", at(1)) == "in-progress"


def test_clock_before_creation_is_treated_as_zero_elapsed():
    assert compute_status(OrderVariant.QUICK, T0, "pending", at(-30)) == "pending"


def test_repeated_evaluation_is_idempotent():
    now = at(75)
    first = compute_status(OrderVariant.QUICK, T0, "pending", now)
    second = compute_status(OrderVariant.QUICK, T0, first, now)
    assert first == second == "cooking"


def test_variant_value_is_accepted():
    assert compute_status("plan", T0, "scheduled", at(130)) == "in-progress"


def test_schedule_rejects_unordered_thresholds():
    with pytest.raises(ValueError):
        LifecycleSchedule(
            QUICK_SEQUENCE,
            tuple(timedelta(seconds=s) for s in (20, 60, 60, 300)),
        )


def test_schedule_rejects_wrong_threshold_count():
    with pytest.raises(ValueError):
        LifecycleSchedule(QUICK_SEQUENCE, (timedelta(seconds=20),))


def test_custom_schedule_override():
    fast = {
        OrderVariant.QUICK: LifecycleSchedule(
            QUICK_SEQUENCE, tuple(timedelta(seconds=s) for s in (1, 2, 3, 4))
        ),
        OrderVariant.PLAN: LifecycleSchedule(
            ("scheduled", "in-progress", "delivered"),
            (timedelta(seconds=1), timedelta(seconds=2)),
        ),
    }
    assert compute_status(OrderVariant.QUICK, T0, "pending", at(4), fast) == "delivered"


def test_statuses_for_includes_cancelled():
    assert statuses_for(OrderVariant.PLAN) == (
        "scheduled",
        "in-progress",
        "delivered",
        "cancelled",
    )


def test_transition_messages():
    order_id = uuid.uuid4()
    quick = SimpleNamespace(variant=OrderVariant.QUICK, order_id=order_id, plan_type=None)
    plan = SimpleNamespace(variant=OrderVariant.PLAN, order_id=order_id, plan_type="keto")

    assert transition_message(quick, "cooking") == f"Your order #{order_id} is now cooking."
    assert "Enjoy your meal" in transition_message(quick, "delivered")
    assert transition_message(plan, "in-progress") == "Your keto meal is now being prepared!"
    assert (
        transition_message(plan, "delivered")
        == "Your keto meal has been delivered successfully!"
    )

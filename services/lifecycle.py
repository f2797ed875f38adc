"""
Order lifecycle engine.

Maps the time elapsed since an order was created onto its variant's status
sequence. ``compute_status`` is pure: the sweeper and every read path call it
with the order's own ``created_at``, so redundant or racing callers always
agree and never move an order backwards.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from app.clock import as_naive_utc
from app.config import Settings, settings as default_settings
from domain.enums import (
    OrderVariant,
    QuickOrderStatus,
    PlanOrderStatus,
    TERMINAL_STATUSES,
)


QUICK_SEQUENCE: Tuple[str, ...] = (
    QuickOrderStatus.PENDING.value,
    QuickOrderStatus.CONFIRMED.value,
    QuickOrderStatus.COOKING.value,
    QuickOrderStatus.OUT_FOR_DELIVERY.value,
    QuickOrderStatus.DELIVERED.value,
)

PLAN_SEQUENCE: Tuple[str, ...] = (
    PlanOrderStatus.SCHEDULED.value,
    PlanOrderStatus.IN_PROGRESS.value,
    PlanOrderStatus.DELIVERED.value,
)


@dataclass(frozen=True)
class LifecycleSchedule:
    """
    Status sequence of one variant and the elapsed-time thresholds at which
    each status after the first begins.

    ``thresholds[i]`` is the start of ``sequence[i + 1]``; the final status
    (``delivered``) covers everything past the last threshold.
    """

    sequence: Tuple[str, ...]
    thresholds: Tuple[timedelta, ...]

    def __post_init__(self):
        if len(self.thresholds) != len(self.sequence) - 1:
            raise ValueError("need exactly one threshold per status transition")
        if any(b <= a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError("thresholds must be strictly increasing")

    @property
    def initial(self) -> str:
        return self.sequence[0]

    def status_at(self, elapsed: timedelta) -> str:
        for index, threshold in enumerate(self.thresholds):
            if elapsed < threshold:
                return self.sequence[index]
        return self.sequence[-1]

    def rank(self, status: str) -> int:
        return self.sequence.index(status)


def _seconds(*values: float) -> Tuple[timedelta, ...]:
    return tuple(timedelta(seconds=v) for v in values)


def build_schedules(cfg: Settings) -> dict:
    """Per-variant schedules from settings"""
    return {
        OrderVariant.QUICK: LifecycleSchedule(
            QUICK_SEQUENCE,
            _seconds(
                cfg.quick_confirm_after_sec,
                cfg.quick_cooking_after_sec,
                cfg.quick_dispatch_after_sec,
                cfg.quick_deliver_after_sec,
            ),
        ),
        OrderVariant.PLAN: LifecycleSchedule(
            PLAN_SEQUENCE,
            _seconds(cfg.plan_start_after_sec, cfg.plan_deliver_after_sec),
        ),
    }


DEFAULT_SCHEDULES = build_schedules(default_settings)


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def schedule_for(variant, schedules: Optional[dict] = None) -> LifecycleSchedule:
    return (schedules or DEFAULT_SCHEDULES)[OrderVariant(variant)]


def statuses_for(variant) -> Sequence[str]:
    """Every status an order of this variant may hold, cancelled included"""
    return schedule_for(variant).sequence + ("cancelled",)


def compute_status(
    variant,
    created_at: datetime,
    current_status: str,
    now: datetime,
    schedules: Optional[dict] = None,
) -> str:
    """
    Status an order should hold at ``now``.

    Args:
        variant: OrderVariant (or its value) selecting the schedule
        created_at: the order's creation timestamp
        current_status: stored status, a member of the variant's sequence
        now: current time, not earlier than ``created_at``
        schedules: optional override of the per-variant schedules

    Returns:
        ``current_status`` if it is terminal or already further along than
        the time-derived status, otherwise the time-derived status.
    """
    if is_terminal(current_status):
        return current_status

    schedule = schedule_for(variant, schedules)
    elapsed = as_naive_utc(now) - as_naive_utc(created_at)
    if elapsed < timedelta(0):
        elapsed = timedelta(0)
    target = schedule.status_at(elapsed)

    if schedule.rank(target) < schedule.rank(current_status):
        return current_status
    return target


def transition_message(order, new_status: str) -> str:
    """Human-readable notification text for a status change"""
    if OrderVariant(order.variant) == OrderVariant.PLAN:
        if new_status == PlanOrderStatus.IN_PROGRESS.value:
            return f"Your {order.plan_type} meal is now being prepared!"
        if new_status == PlanOrderStatus.DELIVERED.value:
            return f"Your {order.plan_type} meal has been delivered successfully!"
        return f"Your {order.plan_type} meal is now {new_status}."
    if new_status == QuickOrderStatus.DELIVERED.value:
        return f"Your order #{order.order_id} has been delivered. Enjoy your meal!"
    return f"Your order #{order.order_id} is now {new_status}."

from typing import Optional, Tuple, Union
from uuid import UUID
from datetime import datetime
from sqlalchemy.orm import Session
import calendar
import logging
import re

from domain.models import AppUser
from domain.schemas.subscription_schemas import BoxQuotaResponse, PremiumStatusResponse
from repositories import UserRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("puttybox.quota")

# Subscription length in months -> boxes allotted
PLAN_TO_BOXES = {1: 30, 3: 90, 6: 180}
BOXES_PER_MONTH = 30


def boxes_for_months(months: int) -> int:
    return PLAN_TO_BOXES.get(months, months * BOXES_PER_MONTH)


def parse_duration(raw: Union[int, str, None]) -> Optional[int]:
    """
    Parse a subscription duration into whole months.

    Accepts 3, "3", "3m", "3month", "3-months", "3 months".
    Returns None when no positive month count can be read.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    match = re.search(r"\d+", str(raw))
    if not match:
        return None
    months = int(match.group(0))
    return months if months > 0 else None


def add_months(start: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` later, clamped to the month's last day"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


class BoxQuotaLedger:
    """
    Per-user subscription box accounting.

    total_boxes is set on activation, delivered_boxes grows by one per plan
    order and never exceeds total_boxes.
    """

    @staticmethod
    def _get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            logger.warning(f"quota_user_not_found user_id={user_id}")
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def allocate(db: Session, user_id: UUID, total_boxes: int) -> BoxQuotaResponse:
        """Set total_boxes and reset delivered_boxes to zero"""
        if total_boxes is None or total_boxes <= 0:
            raise ServiceValidationError("total_boxes must be greater than 0")

        user = BoxQuotaLedger._get_user(db, user_id)
        user.total_boxes = total_boxes
        user.delivered_boxes = 0
        db.commit()
        db.refresh(user)

        logger.info(f"boxes_allocated user_id={user_id} total_boxes={total_boxes}")
        return BoxQuotaLedger._snapshot(user)

    @staticmethod
    def consume(db: Session, user_id: UUID) -> Tuple[int, int]:
        """
        Use one box.

        Returns:
            (delivered_boxes, remaining_boxes) after the increment
        """
        updated = UserRepository(db).increment_delivered_boxes(user_id)
        if not updated:
            raise NotFoundError(f"User {user_id} not found")

        user = BoxQuotaLedger._get_user(db, user_id)
        db.refresh(user)
        logger.info(
            f"box_consumed user_id={user_id} delivered={user.delivered_boxes} "
            f"remaining={user.remaining_boxes}"
        )
        return user.delivered_boxes, user.remaining_boxes

    @staticmethod
    def query(db: Session, user_id: UUID) -> BoxQuotaResponse:
        """
        Current box counters.

        A total_boxes that is missing or non-positive is repaired from the
        plan table using the stored plan duration, or one month without one.
        """
        user = BoxQuotaLedger._get_user(db, user_id)
        BoxQuotaLedger._repair_total(db, user)
        return BoxQuotaLedger._snapshot(user)

    @staticmethod
    def activate_premium(
        db: Session, user_id: UUID, duration: Union[int, str, None], now: datetime
    ) -> PremiumStatusResponse:
        """Start or upgrade a subscription and allocate its boxes"""
        months = parse_duration(duration) or 1
        user = BoxQuotaLedger._get_user(db, user_id)

        user.is_premium = True
        user.premium_since = now
        user.premium_expiry = add_months(now, months)
        user.premium_plan = f"{months}m"
        db.commit()

        BoxQuotaLedger.allocate(db, user_id, boxes_for_months(months))
        db.refresh(user)

        logger.info(
            f"premium_activated user_id={user_id} months={months} "
            f"expiry={user.premium_expiry.isoformat()}"
        )
        return BoxQuotaLedger._status(
            user, f"Premium activated for {months} month(s)"
        )

    @staticmethod
    def premium_status(db: Session, user_id: UUID, now: datetime) -> PremiumStatusResponse:
        """Premium flag and box counters; an expired premium is switched off"""
        user = BoxQuotaLedger._get_user(db, user_id)

        if user.premium_expiry and now > user.premium_expiry:
            if user.is_premium:
                user.is_premium = False
                db.commit()
                db.refresh(user)
                logger.info(f"premium_expired user_id={user_id}")
            status = BoxQuotaLedger._status(user, "Premium expired")
            status.remaining_boxes = 0
            return status

        BoxQuotaLedger._repair_total(db, user)
        message = "Premium active" if user.is_premium else "No active premium"
        return BoxQuotaLedger._status(user, message)

    @staticmethod
    def _repair_total(db: Session, user: AppUser) -> None:
        if (user.total_boxes or 0) > 0:
            return
        months = parse_duration(user.premium_plan) or 1
        user.total_boxes = boxes_for_months(months)
        if user.delivered_boxes is None:
            user.delivered_boxes = 0
        db.commit()
        db.refresh(user)
        logger.warning(
            f"box_total_repaired user_id={user.user_id} total_boxes={user.total_boxes}"
        )

    @staticmethod
    def _snapshot(user: AppUser) -> BoxQuotaResponse:
        return BoxQuotaResponse(
            total_boxes=user.total_boxes or 0,
            delivered_boxes=user.delivered_boxes or 0,
            remaining_boxes=user.remaining_boxes,
        )

    @staticmethod
    def _status(user: AppUser, message: str) -> PremiumStatusResponse:
        return PremiumStatusResponse(
            user_id=user.user_id,
            is_premium=bool(user.is_premium),
            message=message,
            premium_since=user.premium_since,
            premium_expiry=user.premium_expiry,
            premium_plan=user.premium_plan,
            total_boxes=user.total_boxes or 0,
            delivered_boxes=user.delivered_boxes or 0,
            remaining_boxes=user.remaining_boxes,
        )

"""Premium subscription and box quota routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime
import logging
from uuid import UUID

from api.dependencies import get_now
from domain.models import get_db_session
from domain.schemas.subscription_schemas import (
    SubscriptionActivateRequest,
    BoxQuotaResponse,
    PremiumStatusResponse,
)
from services.quota_service import BoxQuotaLedger

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])
logger = logging.getLogger("puttybox.api.subscriptions")


@router.post("/{user_id}/activate", response_model=PremiumStatusResponse)
def activate_subscription(
    user_id: UUID,
    payload: SubscriptionActivateRequest,
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
):
    """
    Activate or upgrade premium.

    Allots 30 boxes per month (90 for 3 months, 180 for 6) and resets the
    delivered count.
    """
    return BoxQuotaLedger.activate_premium(db, user_id, payload.duration, now)


@router.get("/{user_id}", response_model=PremiumStatusResponse)
def get_subscription(
    user_id: UUID,
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
):
    return BoxQuotaLedger.premium_status(db, user_id, now)


@router.get("/{user_id}/boxes", response_model=BoxQuotaResponse)
def get_box_quota(user_id: UUID, db: Session = Depends(get_db_session)):
    return BoxQuotaLedger.query(db, user_id)

from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import datetime
from uuid import UUID


class SubscriptionActivateRequest(BaseModel):
    """Activate or upgrade a premium subscription.

    ``duration`` accepts 3, "3", "3m", "3month" or "3 months".
    """

    duration: Union[int, str] = Field(default=1, description="Duration in months")


class BoxQuotaResponse(BaseModel):
    """Box ledger counters"""

    total_boxes: int
    delivered_boxes: int
    remaining_boxes: int


class PremiumStatusResponse(BoxQuotaResponse):
    """Premium subscription status with box counters"""

    user_id: UUID
    is_premium: bool
    message: str
    premium_since: Optional[datetime] = None
    premium_expiry: Optional[datetime] = None
    premium_plan: Optional[str] = None

"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.order_schemas import (
    OrderItem,
    QuickOrderCreate,
    MealSelection,
    PlanOrderCreate,
    OrderResponse,
    OrderListResponse,
    PlanOrderPlacedResponse,
)
from domain.schemas.notification_schemas import (
    NotificationCreate,
    NotificationResponse,
)
from domain.schemas.subscription_schemas import (
    SubscriptionActivateRequest,
    BoxQuotaResponse,
    PremiumStatusResponse,
)
from domain.schemas.user_schemas import UserCreate, UserResponse

__all__ = [
    # Order schemas
    "OrderItem",
    "QuickOrderCreate",
    "MealSelection",
    "PlanOrderCreate",
    "OrderResponse",
    "OrderListResponse",
    "PlanOrderPlacedResponse",
    # Notification schemas
    "NotificationCreate",
    "NotificationResponse",
    # Subscription schemas
    "SubscriptionActivateRequest",
    "BoxQuotaResponse",
    "PremiumStatusResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
]

"""Services package - Business logic layer"""

from services.user_service import UserService
from services.quota_service import BoxQuotaLedger
from services.notification_service import NotificationEmitter, NotificationService
from services.order_service import OrderService
from services.sweeper import OrderSweeper

# Note: lifecycle contains pure functions, not a class

__all__ = [
    "UserService",
    "BoxQuotaLedger",
    "NotificationEmitter",
    "NotificationService",
    "OrderService",
    "OrderSweeper",
]

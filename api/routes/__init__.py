"""API routes package"""

from . import (
    users,
    orders,
    plan_orders,
    notifications,
    subscriptions,
    plans,
    admin,
    health,
    realtime,
)

__all__ = [
    "users",
    "orders",
    "plan_orders",
    "notifications",
    "subscriptions",
    "plans",
    "admin",
    "health",
    "realtime",
]

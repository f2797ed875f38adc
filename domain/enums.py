"""
Domain enums for PuttyBox.
Contains all enumeration types used across the domain models.
"""

import enum


class OrderVariant(str, enum.Enum):
    """Order kinds, each with its own lifecycle"""

    QUICK = "quick"
    PLAN = "plan"


class QuickOrderStatus(str, enum.Enum):
    """Quick order lifecycle, in progression order"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COOKING = "cooking"
    OUT_FOR_DELIVERY = "out for delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PlanOrderStatus(str, enum.Enum):
    """Plan order lifecycle, in progression order"""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({"delivered", "cancelled"})


class MealType(str, enum.Enum):
    """Quick order meal slot"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods"""

    COD = "cod"
    ONLINE = "online"


class PlanType(str, enum.Enum):
    """Subscription meal plans"""

    PROTEIN = "protein"
    KETO = "keto"
    VEGAN = "vegan"
    WEIGHTLOSS = "weightloss"

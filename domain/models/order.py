"""
Order models.

Quick and plan orders share one table; ``variant`` selects the lifecycle.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    JSON,
    Index,
    UUID,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base
from domain.enums import OrderVariant


class MealOrder(Base):
    """A quick or plan order"""

    __tablename__ = "meal_order"

    order_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    variant = Column(SQLEnum(OrderVariant), nullable=False)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Owner snapshot at order time
    user_name = Column(Text, nullable=False)
    user_email = Column(Text)

    # Set from the injected clock, never by the database
    created_at = Column(TIMESTAMP(timezone=False), nullable=False)
    status = Column(Text, nullable=False)

    # Money (quick orders)
    meal_type = Column(Text)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    delivery_charge = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)

    # Delivery (quick orders)
    address = Column(Text)
    phone = Column(Text)
    payment_method = Column(Text)

    # Subscription (plan orders)
    plan_type = Column(Text)
    selected_meals = Column(JSON)  # {category: {"name": ..., ...}} in catalog order
    protein_target = Column(Numeric(6, 2))

    user = relationship("AppUser", back_populates="orders")

    __table_args__ = (
        Index("ix_meal_order_user_created", "user_id", "created_at"),
        Index("ix_meal_order_status", "status"),
    )

"""
User-related database models.
"""

from sqlalchemy import Column, Text, TIMESTAMP, Boolean, Integer, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class AppUser(Base):
    """User account with premium subscription and box quota fields.

    The account itself belongs to the auth/profile subsystem; the box fields
    are mutated only through the quota ledger.
    """

    __tablename__ = "app_user"

    user_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Premium subscription
    is_premium = Column(Boolean, nullable=False, default=False)
    premium_since = Column(TIMESTAMP(timezone=False), nullable=True)
    premium_expiry = Column(TIMESTAMP(timezone=False), nullable=True)
    premium_plan = Column(Text, nullable=True)  # e.g. "3m"

    # Box quota
    total_boxes = Column(Integer, nullable=False, default=0)
    delivered_boxes = Column(Integer, nullable=False, default=0)

    # Relationships
    orders = relationship(
        "MealOrder", back_populates="user", cascade="all, delete-orphan"
    )
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def remaining_boxes(self) -> int:
        return max((self.total_boxes or 0) - (self.delivered_boxes or 0), 0)

    def has_valid_premium(self, now) -> bool:
        """Premium flag set and not yet expired at ``now`` (naive UTC)"""
        if not self.is_premium or self.premium_expiry is None:
            return False
        return now <= self.premium_expiry

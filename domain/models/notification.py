"""
Notification model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, UUID
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base


class Notification(Base):
    """In-app notification; is_read only ever flips from False to True"""

    __tablename__ = "notification"

    notification_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=False), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)

    user = relationship("AppUser", back_populates="notifications")

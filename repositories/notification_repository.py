"""
Notification Repository - Data access layer for in-app notifications
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Notification


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification data access"""

    id_field = "notification_id"

    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def list_for_user(self, user_id: UUID, limit: int = 100) -> List[Notification]:
        """Notifications for a user, newest first"""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .all()
        )

    def mark_read(self, notification: Notification) -> Notification:
        """Flip the read flag; already-read notifications are left as is"""
        if not notification.is_read:
            notification.is_read = True
            self.db.commit()
            self.db.refresh(notification)
        return notification

"""
Notification emitter.

Persists a notification and best-effort broadcasts it on the global channel
and on the owner's ``user_<id>`` room. The stored record is the source of
truth; a missing listener or a failed broadcast never fails the call.
"""

from typing import List, Optional
from uuid import UUID
from datetime import datetime
from sqlalchemy.orm import Session
import logging

from adapters.broadcast import Broadcaster, NullBroadcaster, user_room
from app.clock import utcnow
from domain.models import Notification
from domain.schemas.notification_schemas import NotificationResponse
from repositories import NotificationRepository, UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("puttybox.notifications")

NEW_NOTIFICATION_EVENT = "newNotification"


class NotificationEmitter:
    """Creates notifications and fans them out over the broadcaster"""

    def __init__(self, broadcaster: Optional[Broadcaster] = None):
        self.broadcaster = broadcaster or NullBroadcaster()

    def notify(
        self,
        db: Session,
        user_id: UUID,
        message: str,
        now: Optional[datetime] = None,
    ) -> Notification:
        """
        Persist an unread notification and broadcast it.

        Raises:
            Exception: whatever the persistence layer raised; the session is
                rolled back first. Broadcast failures are logged, not raised.
        """
        notification = Notification(
            user_id=user_id,
            message=message,
            created_at=now or utcnow(),
            is_read=False,
        )
        try:
            NotificationRepository(db).create(notification)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"notification_created notification_id={notification.notification_id} "
            f"user_id={user_id}"
        )
        self.publish(notification)
        return notification

    def publish(self, notification: Notification) -> None:
        """Broadcast to the global channel and the owner's room"""
        payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
        for room in (None, user_room(notification.user_id)):
            try:
                self.broadcaster.publish(NEW_NOTIFICATION_EVENT, payload, room=room)
            except Exception as exc:
                logger.warning(
                    f"notification_broadcast_failed notification_id="
                    f"{notification.notification_id} room={room or 'all'} error={exc}"
                )


class NotificationService:
    """Read side and direct creation of notifications"""

    @staticmethod
    def create(
        db: Session, emitter: NotificationEmitter, user_id: UUID, message: str, now: datetime
    ) -> NotificationResponse:
        """Create a notification for an existing user"""
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User {user_id} not found")
        notification = emitter.notify(db, user_id, message, now=now)
        return NotificationResponse.model_validate(notification)

    @staticmethod
    def list_for_user(db: Session, user_id: UUID) -> List[NotificationResponse]:
        """All notifications for a user, newest first"""
        notifications = NotificationRepository(db).list_for_user(user_id)
        return [NotificationResponse.model_validate(n) for n in notifications]

    @staticmethod
    def mark_read(db: Session, notification_id: UUID) -> NotificationResponse:
        """Mark one notification as read; repeating the call is a no-op"""
        repo = NotificationRepository(db)
        notification = repo.get_by_id(notification_id)
        if not notification:
            raise NotFoundError(f"Notification {notification_id} not found")
        repo.mark_read(notification)
        logger.info(f"notification_read notification_id={notification_id}")
        return NotificationResponse.model_validate(notification)

"""Notification routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from datetime import datetime
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_emitter, get_now
from domain.models import get_db_session
from domain.schemas.notification_schemas import NotificationCreate, NotificationResponse
from services.notification_service import NotificationEmitter, NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])
logger = logging.getLogger("puttybox.api.notifications")


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    emitter: NotificationEmitter = Depends(get_emitter),
):
    return NotificationService.create(db, emitter, payload.user_id, payload.message, now)


@router.get("/{user_id}", response_model=List[NotificationResponse])
def list_notifications(user_id: UUID, db: Session = Depends(get_db_session)):
    """A user's notifications, newest first"""
    return NotificationService.list_for_user(db, user_id)


@router.put("/read/{notification_id}", response_model=NotificationResponse)
def mark_notification_read(notification_id: UUID, db: Session = Depends(get_db_session)):
    """Mark a notification as read; calling it again changes nothing"""
    return NotificationService.mark_read(db, notification_id)

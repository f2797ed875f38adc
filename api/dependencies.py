"""
API dependencies for dependency injection
"""

from datetime import datetime
from typing import Optional
from fastapi import Depends, Header, Request

from app.config import settings
from app.exceptions import ForbiddenError
from services.notification_service import NotificationEmitter
from services.order_service import OrderService


def get_clock(request: Request):
    """Clock installed on the application (SystemClock in production)"""
    return request.app.state.clock


def get_now(clock=Depends(get_clock)) -> datetime:
    return clock.now()


def get_emitter(request: Request) -> NotificationEmitter:
    return request.app.state.emitter


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def require_admin(x_admin_key: Optional[str] = Header(default=None)) -> None:
    """Guard for admin routes; open when no admin key is configured"""
    if settings.admin_api_key and x_admin_key != settings.admin_api_key:
        raise ForbiddenError("Admin access required")

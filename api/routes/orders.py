"""Quick order routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import datetime
import logging
from uuid import UUID

from api.dependencies import get_now, get_order_service
from domain.enums import OrderVariant
from domain.mappers import OrderMapper
from domain.models import get_db_session
from domain.schemas.order_schemas import (
    QuickOrderCreate,
    OrderResponse,
    OrderListResponse,
)
from services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Quick Orders"])
logger = logging.getLogger("puttybox.api.orders")


@router.post("/quick", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_quick_order(
    payload: QuickOrderCreate,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """
    Place a quick order.

    The total is the item subtotal plus a tiered delivery charge (waived for
    premium members). The order starts as ``pending`` and advances on its own.
    """
    order = service.place_quick_order(db, user_id, payload, now)
    return OrderMapper.to_response(order)


@router.get("/quick", response_model=OrderListResponse)
def list_quick_orders(
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """List a user's quick orders, newest first"""
    orders = service.list_orders(db, user_id, OrderVariant.QUICK, now)
    return OrderListResponse(
        count=len(orders), orders=[OrderMapper.to_response(o) for o in orders]
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_quick_order(
    order_id: UUID,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order(db, user_id, order_id, OrderVariant.QUICK, now)
    return OrderMapper.to_response(order)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_quick_order(
    order_id: UUID,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """Cancel a quick order within three minutes of placing it"""
    order = service.cancel_order(db, user_id, order_id, OrderVariant.QUICK, now)
    return OrderMapper.to_response(order)

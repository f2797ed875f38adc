"""Subscription plan order routes"""

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
    PlanOrderCreate,
    PlanOrderPlacedResponse,
    OrderResponse,
    OrderListResponse,
)
from services.order_service import OrderService

router = APIRouter(prefix="/plan-orders", tags=["Plan Orders"])
logger = logging.getLogger("puttybox.api.plan_orders")


@router.post(
    "", response_model=PlanOrderPlacedResponse, status_code=status.HTTP_201_CREATED
)
def place_plan_order(
    payload: PlanOrderCreate,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """
    Schedule a plan order.

    ``selected_meals`` must name exactly one catalog item per category of the
    plan. Each placement uses one subscription box; placement is refused with
    NO_BOXES_LEFT once the allotment is used up.
    """
    return service.place_plan_order(db, user_id, payload, now)


@router.get("", response_model=OrderListResponse)
def list_plan_orders(
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """List a user's plan orders, newest first"""
    orders = service.list_orders(db, user_id, OrderVariant.PLAN, now)
    return OrderListResponse(
        count=len(orders), orders=[OrderMapper.to_response(o) for o in orders]
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_plan_order(
    order_id: UUID,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    order = service.get_order(db, user_id, order_id, OrderVariant.PLAN, now)
    return OrderMapper.to_response(order)


@router.post(
    "/{order_id}/reorder",
    response_model=PlanOrderPlacedResponse,
    status_code=status.HTTP_201_CREATED,
)
def reorder_plan_order(
    order_id: UUID,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """Schedule a copy of an earlier plan order; uses one more box"""
    return service.reorder_plan_order(db, user_id, order_id, now)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_plan_order(
    order_id: UUID,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """Cancel a plan order within the cancellation window; the box is not refunded"""
    order = service.cancel_order(db, user_id, order_id, OrderVariant.PLAN, now)
    return OrderMapper.to_response(order)

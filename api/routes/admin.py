"""Admin routes"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from datetime import datetime
import logging
from uuid import UUID

from api.dependencies import get_now, get_order_service, require_admin
from api.responses import StatusResponse
from domain.mappers import OrderMapper
from domain.models import get_db_session
from domain.schemas.order_schemas import OrderListResponse
from services.order_service import OrderService

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)]
)
logger = logging.getLogger("puttybox.api.admin")


@router.get("/orders", response_model=OrderListResponse)
def list_all_orders(
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
    service: OrderService = Depends(get_order_service),
):
    """Every order of both kinds, newest first"""
    orders = service.list_all_orders(db, now)
    return OrderListResponse(
        count=len(orders), orders=[OrderMapper.to_response(o) for o in orders]
    )


@router.delete("/orders/{order_id}", response_model=StatusResponse)
def purge_order(
    order_id: UUID,
    db: Session = Depends(get_db_session),
    service: OrderService = Depends(get_order_service),
):
    """Delete an order permanently"""
    service.purge_order(db, order_id)
    return StatusResponse(detail=f"Order {order_id} deleted")


@router.post("/sweep")
def run_sweep(request: Request):
    """Run one status sweep now and report how many orders moved"""
    changed = request.app.state.sweeper.sweep_once()
    logger.info(f"manual_sweep changed={changed}")
    return {"status": "ok", "changed": changed}

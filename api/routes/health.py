"""Health check routes"""

from fastapi import APIRouter, Request
import logging

from api.responses import HealthResponse
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("puttybox.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check(request: Request):
    """Basic health check endpoint"""
    state = request.app.state
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
        sweeper_running=state.sweeper.running,
        websocket_connections=state.broadcaster.connection_count(),
    )

"""
Shared API response models.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime

from app.clock import utcnow


class StatusResponse(BaseModel):
    """Plain acknowledgement for operations without a resource body"""

    status: str = Field("ok", description="Operation status")
    detail: Optional[str] = Field(None, description="Human-readable message")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    sweeper_running: bool = Field(False, description="Whether the status sweeper is active")
    websocket_connections: int = Field(0, description="Open real-time connections")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")

from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID


class NotificationCreate(BaseModel):
    """Schema for creating a notification directly"""

    user_id: UUID
    message: str = Field(..., min_length=1, max_length=1000)


class NotificationResponse(BaseModel):
    """Schema for notification response"""

    notification_id: UUID
    user_id: UUID
    message: str
    created_at: datetime
    is_read: bool

    model_config = {"from_attributes": True}

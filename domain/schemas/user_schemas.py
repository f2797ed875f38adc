from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime
from uuid import UUID


class UserCreate(BaseModel):
    """Schema for registering a user record"""

    email: EmailStr
    full_name: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User record with subscription and box fields"""

    user_id: UUID
    email: str
    full_name: str
    is_premium: bool
    premium_since: Optional[datetime] = None
    premium_expiry: Optional[datetime] = None
    premium_plan: Optional[str] = None
    total_boxes: int
    delivered_boxes: int
    remaining_boxes: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

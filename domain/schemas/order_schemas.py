from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from domain.enums import MealType, PaymentMethod, PlanType, OrderVariant


class OrderItem(BaseModel):
    """A line item of a quick order"""

    name: str = Field(..., min_length=1, description="Menu item name")
    price: Decimal = Field(..., ge=0, description="Unit price")
    calories: Optional[int] = Field(None, ge=0)
    quantity: int = Field(default=1, ge=1)

    model_config = {"from_attributes": True}


class QuickOrderCreate(BaseModel):
    """Schema for placing a quick order"""

    meal_type: MealType
    items: List[OrderItem] = Field(..., min_length=1)
    address: str = Field(..., min_length=1, description="Free-form delivery address")
    phone: str = Field(..., min_length=1, description="10-digit mobile number")
    payment_method: PaymentMethod = PaymentMethod.COD

    @field_validator("address", "phone")
    @classmethod
    def strip_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class MealSelection(BaseModel):
    """One chosen catalog item; extra catalog attributes are ignored"""

    name: str = Field(..., min_length=1)

    model_config = {"extra": "ignore"}


class PlanOrderCreate(BaseModel):
    """Schema for scheduling a plan order"""

    plan_type: PlanType
    selected_meals: Dict[str, MealSelection] = Field(
        ..., description="Meal category -> chosen item, one per plan category"
    )
    protein_target: Optional[Decimal] = Field(
        None, gt=0, le=500, description="Daily protein target in grams"
    )

    @field_validator("plan_type", mode="before")
    @classmethod
    def normalize_plan_type(cls, v):
        return v.lower() if isinstance(v, str) else v


class OrderResponse(BaseModel):
    """Order as returned to clients and broadcast on the real-time channel"""

    order_id: UUID
    variant: OrderVariant
    user_id: UUID
    user_name: str
    user_email: Optional[str] = None
    created_at: datetime
    status: str
    meal_type: Optional[str] = None
    items: List[OrderItem] = []
    subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal
    address: Optional[str] = None
    phone: Optional[str] = None
    payment_method: Optional[str] = None
    plan_type: Optional[str] = None
    selected_meals: Optional[Dict[str, Dict[str, Any]]] = None
    protein_target: Optional[Decimal] = None

    model_config = {"from_attributes": True}


class OrderListResponse(BaseModel):
    """List of orders, newest first"""

    count: int
    orders: List[OrderResponse]


class PlanOrderPlacedResponse(BaseModel):
    """Plan order plus the owner's box counters after consumption"""

    message: str
    order: OrderResponse
    delivered_boxes: int
    total_boxes: int
    remaining_boxes: int

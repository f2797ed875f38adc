"""
Order mappers.
Handles transformation between the MealOrder ORM model and its DTOs.
"""

from typing import Any, Dict

from domain.models import MealOrder
from domain.schemas.order_schemas import OrderResponse


class OrderMapper:
    """Mapper for order transformations."""

    @staticmethod
    def to_response(order: MealOrder) -> OrderResponse:
        """
        Convert a MealOrder ORM instance to OrderResponse.

        Args:
            order: MealOrder ORM instance

        Returns:
            OrderResponse DTO
        """
        return OrderResponse.model_validate(order)

    @staticmethod
    def to_event(order: MealOrder) -> Dict[str, Any]:
        """JSON-safe payload for real-time broadcast"""
        return OrderMapper.to_response(order).model_dump(mode="json")

"""
Order Repository - Data access layer for quick and plan orders
"""

from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy import update
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealOrder
from domain.enums import OrderVariant, TERMINAL_STATUSES


class OrderRepository(BaseRepository[MealOrder]):
    """Repository for order data access"""

    id_field = "order_id"

    def __init__(self, db: Session):
        super().__init__(db, MealOrder)

    def get_by_id_and_variant(
        self, order_id: UUID, variant: OrderVariant
    ) -> Optional[MealOrder]:
        """Get order by ID restricted to one variant"""
        return (
            self.db.query(MealOrder)
            .filter(MealOrder.order_id == order_id, MealOrder.variant == variant)
            .first()
        )

    def list_for_user(
        self, user_id: UUID, variant: Optional[OrderVariant] = None
    ) -> List[MealOrder]:
        """Orders owned by a user, newest first"""
        query = self.db.query(MealOrder).filter(MealOrder.user_id == user_id)
        if variant is not None:
            query = query.filter(MealOrder.variant == variant)
        return query.order_by(MealOrder.created_at.desc()).all()

    def list_all(self, skip: int = 0, limit: int = 200) -> List[MealOrder]:
        """All orders, newest first"""
        return (
            self.db.query(MealOrder)
            .order_by(MealOrder.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_active(self) -> List[MealOrder]:
        """Orders whose status is not terminal, oldest first"""
        return (
            self.db.query(MealOrder)
            .filter(MealOrder.status.notin_(TERMINAL_STATUSES))
            .order_by(MealOrder.created_at.asc())
            .all()
        )

    def compare_and_set_status(
        self, order_id: UUID, expected: Iterable[str], new_status: str
    ) -> bool:
        """
        Set the status only if the stored status is still one of ``expected``.

        A writer that read a stale status (e.g. the sweeper racing a cancel)
        updates nothing instead of overwriting the newer value.

        Returns:
            True if the row was updated
        """
        stmt = (
            update(MealOrder)
            .where(
                MealOrder.order_id == order_id,
                MealOrder.status.in_(list(expected)),
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

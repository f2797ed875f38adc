"""
User Repository - Data access layer for user records and box counters
"""

from typing import Optional
from uuid import UUID
from sqlalchemy import case, update
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    id_field = "user_id"

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email"""
        return self.db.query(AppUser).filter(AppUser.email == email).first()

    def create_user(self, email: str, full_name: str) -> AppUser:
        """Create a new user"""
        user = AppUser(email=email, full_name=full_name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")

    def increment_delivered_boxes(self, user_id: UUID) -> int:
        """
        Atomically add one delivered box, clamped at total_boxes.

        Runs as a single UPDATE so concurrent placements cannot lose an
        increment or push delivered past total.

        Returns:
            Number of rows updated (0 if the user does not exist)
        """
        bumped = AppUser.delivered_boxes + 1
        stmt = (
            update(AppUser)
            .where(AppUser.user_id == user_id)
            .values(
                delivered_boxes=case(
                    (bumped > AppUser.total_boxes, AppUser.total_boxes),
                    else_=bumped,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount

from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser
from repositories import UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("puttybox.users")


class UserService:
    """Business logic for user accounts"""

    @staticmethod
    def create_user(db: Session, email: str, full_name: str) -> AppUser:
        """Register a user; a duplicate email raises ConflictError"""
        user = UserRepository(db).create_user(email, full_name)
        logger.info(f"user_created user_id={user.user_id}")
        return user

    @staticmethod
    def get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            logger.warning(f"user_not_found user_id={user_id}")
            raise NotFoundError(f"User {user_id} not found")
        logger.info(f"user_fetched user_id={user_id}")
        return user

"""
Base repository for the data access layer.
Services talk to repositories; repositories own every query and commit.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Common lookups and writes keyed on the model's UUID primary key.

    Subclasses name the key column in ``id_field`` (user_id, order_id,
    notification_id).
    """

    id_field: str = "id"

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        column = getattr(self.model, self.id_field)
        return self.db.query(self.model).filter(column == entity_id).first()

    def create(self, entity: ModelType) -> ModelType:
        """Insert and commit; the returned entity carries generated values"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Delete by primary key; False when nothing matched"""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True

    def exists(self, entity_id: UUID) -> bool:
        return self.get_by_id(entity_id) is not None

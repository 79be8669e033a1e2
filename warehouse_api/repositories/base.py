from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar, cast

from sqlalchemy import func, select
from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """Query helpers shared by every aggregate repository."""

    model: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def exists(self, entity_id: int) -> bool:
        return self.get(entity_id) is not None

    def list_all(self) -> list[ModelT]:
        stmt = select(self.model).order_by(self.model.id)
        return cast(list[ModelT], list(self.db.execute(stmt).unique().scalars().all()))

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(self.model)).scalar_one()

    def save(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()

    def _all(self, stmt) -> list[ModelT]:
        return cast(list[ModelT], list(self.db.execute(stmt).unique().scalars().all()))

    def _first(self, stmt) -> Optional[ModelT]:
        return self.db.execute(stmt).unique().scalars().first()


__all__ = ["Repository"]

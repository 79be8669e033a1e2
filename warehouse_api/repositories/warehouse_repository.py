from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, select

from warehouse_api.models.warehouse import Warehouse
from warehouse_api.repositories.base import Repository


class WarehouseRepository(Repository[Warehouse]):
    model = Warehouse

    def find_by_name(self, name: str) -> Optional[Warehouse]:
        return self._first(select(Warehouse).where(Warehouse.name == name))

    def exists_by_name(self, name: str) -> bool:
        stmt = select(Warehouse.id).where(Warehouse.name == name).limit(1)
        return self.db.execute(stmt).first() is not None

    def search(self, term: str) -> list[Warehouse]:
        like = f"%{term.strip().lower()}%"
        stmt = (
            select(Warehouse)
            .where(
                or_(
                    func.lower(Warehouse.name).like(like),
                    func.lower(Warehouse.location).like(like),
                )
            )
            .order_by(Warehouse.name)
        )
        return self._all(stmt)

    def find_by_capacity_between(self, min_capacity: float, max_capacity: float) -> list[Warehouse]:
        stmt = (
            select(Warehouse)
            .where(Warehouse.capacity.between(min_capacity, max_capacity))
            .order_by(Warehouse.capacity.desc())
        )
        return self._all(stmt)

    def find_all_locations(self) -> list[str]:
        stmt = select(Warehouse.location).distinct().order_by(Warehouse.location)
        return list(self.db.execute(stmt).scalars().all())

    def total_capacity(self) -> float:
        stmt = select(func.coalesce(func.sum(Warehouse.capacity), 0.0))
        return float(self.db.execute(stmt).scalar_one())


__all__ = ["WarehouseRepository"]

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select

from warehouse_api.models.inventory_item import InventoryItem
from warehouse_api.repositories.base import Repository


class InventoryItemRepository(Repository[InventoryItem]):
    model = InventoryItem

    def find_by_product_and_warehouse(
        self,
        product_id: int,
        warehouse_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[InventoryItem]:
        stmt = select(InventoryItem).where(
            InventoryItem.product_id == product_id,
            InventoryItem.warehouse_id == warehouse_id,
        )
        if for_update:
            # Row lock on the item only; a no-op on SQLite.
            stmt = stmt.with_for_update(of=InventoryItem)
        return self._first(stmt)

    def find_by_warehouse(self, warehouse_id: int) -> list[InventoryItem]:
        return self._all(
            select(InventoryItem)
            .where(InventoryItem.warehouse_id == warehouse_id)
            .order_by(InventoryItem.id)
        )

    def find_by_product(self, product_id: int) -> list[InventoryItem]:
        return self._all(
            select(InventoryItem)
            .where(InventoryItem.product_id == product_id)
            .order_by(InventoryItem.id)
        )

    def find_below_threshold(self, threshold: Decimal) -> list[InventoryItem]:
        return self._all(
            select(InventoryItem)
            .where(InventoryItem.quantity <= threshold)
            .order_by(InventoryItem.quantity, InventoryItem.id)
        )

    def find_below_minimum_level(self) -> list[InventoryItem]:
        return self._all(
            select(InventoryItem)
            .where(
                InventoryItem.minimum_level.is_not(None),
                InventoryItem.quantity < InventoryItem.minimum_level,
            )
            .order_by(InventoryItem.id)
        )

    def find_above_maximum_level(self) -> list[InventoryItem]:
        return self._all(
            select(InventoryItem)
            .where(
                InventoryItem.maximum_level.is_not(None),
                InventoryItem.quantity > InventoryItem.maximum_level,
            )
            .order_by(InventoryItem.id)
        )

    def total_quantity_by_product(self, product_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(InventoryItem.quantity), 0)).where(
            InventoryItem.product_id == product_id
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))

    def total_quantity_by_warehouse(self, warehouse_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(InventoryItem.quantity), 0)).where(
            InventoryItem.warehouse_id == warehouse_id
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))

    def count_by_warehouse(self, warehouse_id: int) -> int:
        stmt = select(func.count(InventoryItem.id)).where(InventoryItem.warehouse_id == warehouse_id)
        return self.db.execute(stmt).scalar_one()

    def count_by_product(self, product_id: int) -> int:
        stmt = select(func.count(InventoryItem.id)).where(InventoryItem.product_id == product_id)
        return self.db.execute(stmt).scalar_one()


__all__ = ["InventoryItemRepository"]

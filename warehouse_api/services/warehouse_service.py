from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.exceptions import ConflictError, NotFoundError
from warehouse_api.core.validation import validate_id, validate_warehouse
from warehouse_api.database.unit_of_work import unit_of_work
from warehouse_api.models.warehouse import Warehouse
from warehouse_api.repositories import InventoryItemRepository, WarehouseRepository
from warehouse_api.schemas.warehouse import WarehouseCreate, WarehouseUpdate
from warehouse_api.services.audit_service import AuditService

logger = logging.getLogger(__name__)


def utilization_percentage(warehouse: Warehouse, product_count: int) -> float:
    # Item count against capacity; product volume is not taken into account.
    if not warehouse.capacity or warehouse.capacity <= 0:
        return 0.0
    return min(100.0, product_count / warehouse.capacity * 100)


class WarehouseService:
    def __init__(self, db: Session, audit: Optional[AuditService] = None):
        self.db = db
        self.audit = audit or AuditService()
        self.warehouses = WarehouseRepository(db)
        self.items = InventoryItemRepository(db)
        self.default_user = get_settings().DEFAULT_USER_ID

    def list_warehouses(self) -> list[Warehouse]:
        return self.warehouses.list_all()

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        validate_id(warehouse_id, "Warehouse")
        warehouse = self.warehouses.get(warehouse_id)
        if warehouse is None:
            raise NotFoundError(f"Warehouse not found with id: {warehouse_id}")
        return warehouse

    def search_warehouses(self, term: Optional[str]) -> list[Warehouse]:
        if not term or not term.strip():
            return self.list_warehouses()
        return self.warehouses.search(term)

    def create_warehouse(self, payload: WarehouseCreate, user_id: Optional[str] = None) -> Warehouse:
        validate_warehouse(payload)
        with unit_of_work(self.db):
            if self.warehouses.exists_by_name(payload.name):
                raise ConflictError(f"Warehouse with name '{payload.name}' already exists")
            warehouse = self.warehouses.save(Warehouse(**payload.model_dump()))

        self.audit.log_data_change(
            "Warehouse", warehouse.id, "CREATE", user_id or self.default_user,
            new_values={"name": warehouse.name, "location": warehouse.location},
        )
        return warehouse

    def update_warehouse(
        self,
        warehouse_id: int,
        payload: WarehouseUpdate,
        user_id: Optional[str] = None,
    ) -> Warehouse:
        with unit_of_work(self.db):
            warehouse = self.get_warehouse(warehouse_id)
            current = WarehouseCreate.model_validate(warehouse, from_attributes=True)
            draft = current.model_copy(update=payload.model_dump(exclude_unset=True))

            if draft.name != warehouse.name and self.warehouses.exists_by_name(draft.name):
                raise ConflictError(f"Warehouse with name '{draft.name}' already exists")
            validate_warehouse(draft)

            old_values = current.model_dump()
            for field, value in draft.model_dump().items():
                setattr(warehouse, field, value)
            warehouse.updated_at = datetime.now(timezone.utc)
            self.warehouses.save(warehouse)

        self.audit.log_data_change(
            "Warehouse", warehouse.id, "UPDATE", user_id or self.default_user,
            old_values=old_values, new_values=draft.model_dump(),
        )
        return warehouse

    def delete_warehouse(self, warehouse_id: int, user_id: Optional[str] = None) -> None:
        with unit_of_work(self.db):
            warehouse = self.get_warehouse(warehouse_id)
            item_count = self.items.count_by_warehouse(warehouse_id)
            if item_count > 0:
                raise ConflictError(
                    f"Cannot delete a warehouse that holds inventory. Item count: {item_count}"
                )
            self.warehouses.delete(warehouse)

        self.audit.log_data_change(
            "Warehouse", warehouse_id, "DELETE", user_id or self.default_user,
            old_values={"name": warehouse.name},
        )

    def get_inventory_summary(self, warehouse_id: int) -> dict:
        warehouse = self.get_warehouse(warehouse_id)
        items = self.items.find_by_warehouse(warehouse_id)
        return {
            "warehouse_id": warehouse.id,
            "warehouse_name": warehouse.name,
            "total_products": len(items),
            "total_value": sum((item.value for item in items), Decimal("0")),
            "low_stock_count": sum(1 for item in items if item.is_below_minimum_level()),
            "excess_stock_count": sum(1 for item in items if item.is_above_maximum_level()),
            "utilization_percentage": utilization_percentage(warehouse, len(items)),
        }


__all__ = ["WarehouseService", "utilization_percentage"]

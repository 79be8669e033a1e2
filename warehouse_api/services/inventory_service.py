"""
Inventory quantities per (product, warehouse) pair.

Public mutators commit through their own unit of work. ``increase_stock`` and
``decrease_stock`` only flush: they are building blocks for the transaction
service, which owns the surrounding unit of work.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.constants import ZERO
from warehouse_api.core.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from warehouse_api.core.validation import (
    as_decimal,
    as_scaled_decimal,
    validate_id,
    validate_quantity,
)
from warehouse_api.database.unit_of_work import unit_of_work
from warehouse_api.models.inventory_item import InventoryItem
from warehouse_api.models.product import Product
from warehouse_api.models.warehouse import Warehouse
from warehouse_api.repositories import (
    InventoryItemRepository,
    ProductRepository,
    WarehouseRepository,
)
from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _level(value: Any, label: str) -> Optional[Decimal]:
    if value is None:
        return None
    level = as_scaled_decimal(value, label)
    if level < ZERO:
        raise InvalidArgumentError(f"{label} must not be negative")
    return level


class InventoryService:
    def __init__(
        self,
        db: Session,
        audit: Optional[AuditService] = None,
        metrics: Optional[MetricsService] = None,
    ):
        self.db = db
        self.audit = audit or AuditService()
        self.metrics = metrics or MetricsService()
        self.items = InventoryItemRepository(db)
        self.products = ProductRepository(db)
        self.warehouses = WarehouseRepository(db)
        self.default_user = get_settings().DEFAULT_USER_ID

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------
    def _require_product(self, product_id: int) -> Product:
        validate_id(product_id, "Product")
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}")
        return product

    def _require_warehouse(self, warehouse_id: int) -> Warehouse:
        validate_id(warehouse_id, "Warehouse")
        warehouse = self.warehouses.get(warehouse_id)
        if warehouse is None:
            raise NotFoundError(f"Warehouse not found with id: {warehouse_id}")
        return warehouse

    def _locked_item(self, product_id: int, warehouse_id: int) -> Optional[InventoryItem]:
        return self.items.find_by_product_and_warehouse(
            product_id, warehouse_id, for_update=True
        )

    def _after_update(self, item: InventoryItem) -> None:
        self.metrics.record_inventory_update(item.warehouse_id, item.product_id)
        self.metrics.update_inventory_level(
            item.warehouse_id, self.items.total_quantity_by_warehouse(item.warehouse_id)
        )

    def get_item(self, item_id: int) -> InventoryItem:
        item = self.items.get(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item not found with id: {item_id}")
        return item

    def get_quantity(self, product_id: int, warehouse_id: int) -> Decimal:
        item = self.items.find_by_product_and_warehouse(product_id, warehouse_id)
        if item is None:
            return Decimal("0")
        return Decimal(item.quantity)

    def get_total_quantity_by_product(self, product_id: int) -> Decimal:
        self._require_product(product_id)
        return self.items.total_quantity_by_product(product_id)

    def list_all(self) -> list[InventoryItem]:
        return self.items.list_all()

    def list_by_warehouse(self, warehouse_id: int) -> list[InventoryItem]:
        return self.items.find_by_warehouse(warehouse_id)

    def list_by_product(self, product_id: int) -> list[InventoryItem]:
        return self.items.find_by_product(product_id)

    def list_below_minimum_level(self) -> list[InventoryItem]:
        return self.items.find_below_minimum_level()

    def list_above_maximum_level(self) -> list[InventoryItem]:
        return self.items.find_above_maximum_level()

    def list_below_threshold(self, threshold: Any) -> list[InventoryItem]:
        return self.items.find_below_threshold(as_decimal(threshold))

    # ------------------------------------------------------------------
    # stock checks with alerts
    # ------------------------------------------------------------------
    def _raise_alerts(self, items: list[InventoryItem], action: str, reason: str) -> None:
        for item in items:
            self.metrics.record_low_stock_alert(item.product_id)
            self.audit.log_action(
                action,
                self.default_user,
                f"{item.product.full_name} in {item.warehouse.name}: "
                f"quantity {item.quantity} {reason}",
                entity_id=item.id,
            )

    def check_low_stock(self, threshold: Any) -> list[InventoryItem]:
        threshold = as_decimal(threshold)
        items = self.items.find_below_threshold(threshold)
        self._raise_alerts(items, "LOW_STOCK_DETECTED", f"<= threshold {threshold}")
        if items:
            logger.info("Low stock check found %s item(s) at or below %s", len(items), threshold)
        return items

    def check_below_minimum_level(self) -> list[InventoryItem]:
        items = self.items.find_below_minimum_level()
        self._raise_alerts(items, "LOW_STOCK_DETECTED", "below minimum level")
        return items

    def check_above_maximum_level(self) -> list[InventoryItem]:
        items = self.items.find_above_maximum_level()
        for item in items:
            self.audit.log_action(
                "EXCESS_STOCK_DETECTED",
                self.default_user,
                f"{item.product.full_name} in {item.warehouse.name}: "
                f"quantity {item.quantity} above maximum {item.maximum_level}",
                entity_id=item.id,
            )
        return items

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def set_quantity(
        self,
        product_id: int,
        warehouse_id: int,
        quantity: Any,
        user_id: Optional[str] = None,
    ) -> InventoryItem:
        return self.create_inventory_item(
            product_id, warehouse_id, quantity, user_id=user_id, keep_levels=True
        )

    def create_inventory_item(
        self,
        product_id: int,
        warehouse_id: int,
        quantity: Any,
        minimum_level: Any = None,
        maximum_level: Any = None,
        user_id: Optional[str] = None,
        *,
        keep_levels: bool = False,
    ) -> InventoryItem:
        """Create the item for the pair, or overwrite the existing one."""
        user_id = user_id or self.default_user
        with unit_of_work(self.db):
            product = self._require_product(product_id)
            warehouse = self._require_warehouse(warehouse_id)

            quantity = as_scaled_decimal(quantity, "Quantity")
            if quantity < ZERO:
                raise InvalidArgumentError("Quantity must not be negative")
            minimum = _level(minimum_level, "Minimum level")
            maximum = _level(maximum_level, "Maximum level")
            if minimum is not None and maximum is not None and minimum > maximum:
                raise InvalidArgumentError("Minimum level must not exceed maximum level")

            item = self._locked_item(product.id, warehouse.id)
            if item is None:
                old_quantity = None
                item = InventoryItem(
                    product=product,
                    warehouse=warehouse,
                    quantity=quantity,
                    minimum_level=minimum,
                    maximum_level=maximum,
                )
                operation = "CREATE"
            else:
                old_quantity = item.quantity
                item.quantity = quantity
                item.updated_at = _utcnow()
                if not keep_levels:
                    item.minimum_level = minimum
                    item.maximum_level = maximum
                operation = "UPDATE"
            self.items.save(item)

        self.audit.log_data_change(
            "InventoryItem",
            item.id,
            operation,
            user_id,
            old_values={"quantity": old_quantity} if old_quantity is not None else None,
            new_values={"quantity": item.quantity},
        )
        self._after_update(item)
        return item

    def update_levels(
        self,
        item_id: int,
        minimum_level: Any,
        maximum_level: Any,
        user_id: Optional[str] = None,
    ) -> InventoryItem:
        minimum = _level(minimum_level, "Minimum level")
        maximum = _level(maximum_level, "Maximum level")
        if minimum is not None and maximum is not None and minimum > maximum:
            raise InvalidArgumentError("Minimum level must not exceed maximum level")

        with unit_of_work(self.db):
            item = self.get_item(item_id)
            old_values = {"minimum_level": item.minimum_level, "maximum_level": item.maximum_level}
            item.minimum_level = minimum
            item.maximum_level = maximum
            item.updated_at = _utcnow()
            self.items.save(item)

        self.audit.log_data_change(
            "InventoryItem",
            item.id,
            "UPDATE",
            user_id or self.default_user,
            old_values=old_values,
            new_values={"minimum_level": minimum, "maximum_level": maximum},
        )
        return item

    def adjust(
        self,
        product_id: int,
        warehouse_id: int,
        delta: Any,
        user_id: Optional[str] = None,
    ) -> InventoryItem:
        # Unlike increase_stock, a missing item is an error here.
        delta = as_scaled_decimal(delta, "Adjustment")
        with unit_of_work(self.db):
            item = self._locked_item(product_id, warehouse_id)
            if item is None:
                raise NotFoundError(
                    f"Inventory item not found for product {product_id} "
                    f"in warehouse {warehouse_id}"
                )
            old_quantity = Decimal(item.quantity)
            new_quantity = old_quantity + delta
            if new_quantity < ZERO:
                raise InvalidStateError("Inventory cannot be negative")
            item.quantity = new_quantity
            item.updated_at = _utcnow()
            self.items.save(item)

        self.audit.log_data_change(
            "InventoryItem",
            item.id,
            "ADJUST",
            user_id or self.default_user,
            old_values={"quantity": old_quantity},
            new_values={"quantity": new_quantity},
        )
        self._after_update(item)
        return item

    def increase_stock(self, product_id: int, warehouse_id: int, quantity: Any) -> InventoryItem:
        quantity = validate_quantity(quantity, "Increase stock")
        item = self._locked_item(product_id, warehouse_id)
        if item is None:
            item = InventoryItem(
                product=self._require_product(product_id),
                warehouse=self._require_warehouse(warehouse_id),
                quantity=quantity,
            )
        else:
            item.quantity = Decimal(item.quantity) + quantity
            item.updated_at = _utcnow()
        self.items.save(item)
        self._after_update(item)
        return item

    def decrease_stock(self, product_id: int, warehouse_id: int, quantity: Any) -> InventoryItem:
        quantity = validate_quantity(quantity, "Decrease stock")
        item = self._locked_item(product_id, warehouse_id)
        if item is None:
            raise NotFoundError(
                f"Inventory item not found for product {product_id} in warehouse {warehouse_id}"
            )
        new_quantity = Decimal(item.quantity) - quantity
        if new_quantity < ZERO:
            raise InvalidStateError(
                f"Insufficient stock. Available: {item.quantity}, required: {quantity}"
            )
        item.quantity = new_quantity
        item.updated_at = _utcnow()
        self.items.save(item)
        self._after_update(item)
        return item

    def delete_inventory_item(self, item_id: int, user_id: Optional[str] = None) -> None:
        with unit_of_work(self.db):
            item = self.get_item(item_id)
            snapshot = {
                "product_id": item.product_id,
                "warehouse_id": item.warehouse_id,
                "quantity": item.quantity,
            }
            self.items.delete(item)
        self.audit.log_data_change(
            "InventoryItem", item_id, "DELETE", user_id or self.default_user, old_values=snapshot
        )


__all__ = ["InventoryService"]

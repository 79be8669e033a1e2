"""
Read-only reports over inventory and the transaction ledger.

Reports are plain dictionaries; the router layer renders them as JSON.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.dates import utc_range
from warehouse_api.core.exceptions import NotFoundError, ValidationError
from warehouse_api.models.inventory_item import InventoryItem, StockStatus
from warehouse_api.models.transaction import Transaction, TransactionType
from warehouse_api.repositories import (
    InventoryItemRepository,
    TransactionRepository,
    WarehouseRepository,
)
from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


def _sum(values: Iterable[Any]) -> Decimal:
    return sum((Decimal(value) for value in values), Decimal("0"))


def _item_summary(item: InventoryItem) -> dict:
    return {
        "id": item.id,
        "product_code": item.product.code,
        "product_name": item.product.name,
        "quantity": item.quantity,
        "minimum_level": item.minimum_level,
        "maximum_level": item.maximum_level,
        "status": item.stock_status.value,
    }


def _item_detail(item: InventoryItem) -> dict:
    product = item.product
    return {
        "id": item.id,
        "product": {
            "id": product.id,
            "code": product.code,
            "name": product.name,
            "description": product.description,
            "category": product.category,
            "price": product.price,
        },
        "quantity": item.quantity,
        "minimum_level": item.minimum_level,
        "maximum_level": item.maximum_level,
        "status": item.stock_status.value,
        "value": item.value,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


def _transaction_row(transaction: Transaction) -> dict:
    return {
        "id": transaction.id,
        "transaction_type": transaction.transaction_type.value,
        "product_code": transaction.product.code,
        "product_name": transaction.product.name,
        "quantity": transaction.quantity,
        "source_warehouse": (
            transaction.source_warehouse.name if transaction.source_warehouse else None
        ),
        "destination_warehouse": (
            transaction.destination_warehouse.name if transaction.destination_warehouse else None
        ),
        "timestamp": transaction.timestamp,
        "description": transaction.description,
        "user_id": transaction.user_id,
        "reference_number": transaction.reference_number,
        "direction_description": transaction.direction_description,
    }


def _stock_alert(item: InventoryItem, level_key: str) -> dict:
    return {
        "product_code": item.product.code,
        "product_name": item.product.name,
        "current_quantity": item.quantity,
        level_key: getattr(item, level_key),
        "warehouse_name": item.warehouse.name,
        "warehouse_location": item.warehouse.location,
    }


class ReportService:
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
        self.transactions = TransactionRepository(db)
        self.warehouses = WarehouseRepository(db)

    def generate_inventory_report(self, warehouse_id: int, user_id: Optional[str] = None) -> dict:
        started = time.perf_counter()
        warehouse = self.warehouses.get(warehouse_id)
        if warehouse is None:
            raise NotFoundError(f"Warehouse not found with id: {warehouse_id}")

        items = self.items.find_by_warehouse(warehouse_id)
        buckets: dict[StockStatus, list[InventoryItem]] = {status: [] for status in StockStatus}
        for item in items:
            buckets[item.stock_status].append(item)

        by_category: dict[str, list[InventoryItem]] = defaultdict(list)
        for item in items:
            by_category[item.product.category].append(item)
        category_breakdown = {
            category: {
                "item_count": len(grouped),
                "total_quantity": _sum(item.quantity for item in grouped),
                "low_stock_count": sum(1 for item in grouped if item.is_below_minimum_level()),
            }
            for category, grouped in sorted(by_category.items())
        }

        total_quantity = _sum(item.quantity for item in items)
        self.metrics.record_inventory_check(warehouse.id)
        self.metrics.update_inventory_level(warehouse.id, total_quantity)

        report = {
            "timestamp": datetime.now(timezone.utc),
            "warehouse": {
                "id": warehouse.id,
                "name": warehouse.name,
                "location": warehouse.location,
                "capacity": warehouse.capacity,
                "description": warehouse.description,
            },
            "summary": {
                "total_items": len(items),
                "total_quantity": total_quantity,
                "total_value": _sum(item.value for item in items),
                "low_stock_items": len(buckets[StockStatus.LOW]),
                "excess_stock_items": len(buckets[StockStatus.EXCESS]),
                "normal_stock_items": len(buckets[StockStatus.NORMAL]),
            },
            "stock_status": {
                "low": [_item_summary(item) for item in buckets[StockStatus.LOW]],
                "excess": [_item_summary(item) for item in buckets[StockStatus.EXCESS]],
                "normal": [_item_summary(item) for item in buckets[StockStatus.NORMAL]],
            },
            "category_breakdown": category_breakdown,
            "inventory_items": [_item_detail(item) for item in items],
        }

        self.audit.log_performance_metric(
            "GENERATE_INVENTORY_REPORT", (time.perf_counter() - started) * 1000
        )
        self.audit.log_action(
            "INVENTORY_REPORT_GENERATED",
            user_id or get_settings().DEFAULT_USER_ID,
            f"Inventory report generated for warehouse {warehouse.name}",
            entity_id=warehouse.id,
        )
        logger.info("Inventory report for warehouse %s: %s item(s)", warehouse.id, len(items))
        return report

    def generate_overall_inventory_report(self, user_id: Optional[str] = None) -> dict:
        started = time.perf_counter()
        items = self.items.list_all()
        warehouses = self.warehouses.list_all()

        report = {
            "timestamp": datetime.now(timezone.utc),
            "summary": {
                "total_warehouses": len(warehouses),
                "total_inventory_items": len(items),
                "total_quantity": _sum(item.quantity for item in items),
                "total_value": _sum(item.value for item in items),
                "low_stock_items_count": sum(1 for item in items if item.is_below_minimum_level()),
                "excess_stock_items_count": sum(
                    1 for item in items if item.is_above_maximum_level()
                ),
            },
            "warehouse_reports": {
                warehouse.id: self.generate_inventory_report(warehouse.id, user_id)
                for warehouse in warehouses
            },
        }
        self.audit.log_performance_metric(
            "GENERATE_OVERALL_INVENTORY_REPORT", (time.perf_counter() - started) * 1000
        )
        return report

    def generate_system_summary_report(self) -> dict:
        below_minimum = self.items.find_below_minimum_level()
        above_maximum = self.items.find_above_maximum_level()
        recent = self.transactions.find_recent(get_settings().RECENT_TRANSACTIONS_LIMIT)

        return {
            "timestamp": datetime.now(timezone.utc),
            "system_overview": {
                "total_warehouses": self.warehouses.count(),
                "total_inventory_items": self.items.count(),
                "total_transactions": self.transactions.count(),
                "total_warehouse_capacity": self.warehouses.total_capacity(),
                "low_stock_items_count": len(below_minimum),
                "excess_stock_items_count": len(above_maximum),
            },
            "transaction_summary": {
                f"total_{kind.value.lower()}_quantity": self.transactions.total_quantity_by_type(kind)
                for kind in TransactionType
            },
            "recent_activity": [_transaction_row(transaction) for transaction in recent],
            "low_stock_alerts": [_stock_alert(item, "minimum_level") for item in below_minimum],
            "excess_stock_alerts": [_stock_alert(item, "maximum_level") for item in above_maximum],
        }

    def generate_transaction_report(self, start: datetime, end: datetime) -> dict:
        start, end = utc_range(start, end)
        if start > end:
            raise ValidationError("Report start date must not be after end date")

        transactions = self.transactions.find_between(start, end)
        grouped: dict[TransactionType, list[Transaction]] = {kind: [] for kind in TransactionType}
        for transaction in transactions:
            grouped[transaction.transaction_type].append(transaction)

        report: dict[str, Any] = {
            "report_period": {"start_date": start, "end_date": end},
            "timestamp": datetime.now(timezone.utc),
            "total_transactions": len(transactions),
        }
        for kind in TransactionType:
            key = kind.value.lower()
            report[f"{key}_count"] = len(grouped[kind])
            report[f"total_{key}_quantity"] = _sum(t.quantity for t in grouped[kind])
        report["transactions_by_type"] = {kind.value: len(grouped[kind]) for kind in TransactionType}
        report["transactions"] = [_transaction_row(transaction) for transaction in transactions]
        return report


__all__ = ["ReportService"]

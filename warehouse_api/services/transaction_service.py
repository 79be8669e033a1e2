from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.dates import utc_range
from warehouse_api.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from warehouse_api.core.validation import as_decimal, validate_transaction
from warehouse_api.database.unit_of_work import unit_of_work
from warehouse_api.models.transaction import Transaction, TransactionType
from warehouse_api.models.warehouse import Warehouse
from warehouse_api.repositories import (
    ProductRepository,
    TransactionRepository,
    WarehouseRepository,
)
from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.inventory_service import InventoryService
from warehouse_api.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


def _coerce_type(transaction_type: Any) -> TransactionType:
    if isinstance(transaction_type, TransactionType):
        return transaction_type
    try:
        return TransactionType(str(transaction_type).upper())
    except ValueError as exc:
        raise ValidationError(f"Unknown transaction type: {transaction_type}") from exc


class TransactionService:
    """Posts stock movements to the ledger and applies their inventory effect."""

    def __init__(
        self,
        db: Session,
        inventory: Optional[InventoryService] = None,
        audit: Optional[AuditService] = None,
        metrics: Optional[MetricsService] = None,
    ):
        self.db = db
        self.audit = audit or AuditService()
        self.metrics = metrics or MetricsService()
        self.inventory = inventory or InventoryService(db, self.audit, self.metrics)
        self.transactions = TransactionRepository(db)
        self.products = ProductRepository(db)
        self.warehouses = WarehouseRepository(db)
        self.default_user = get_settings().DEFAULT_USER_ID

    def _resolve_warehouse(self, warehouse_id: Optional[int], role: str) -> Optional[Warehouse]:
        if warehouse_id is None:
            return None
        warehouse = self.warehouses.get(warehouse_id)
        if warehouse is None:
            raise NotFoundError(f"{role} warehouse not found with id: {warehouse_id}")
        return warehouse

    def _apply_inventory_effect(self, transaction: Transaction) -> None:
        product_id = transaction.product_id
        quantity = transaction.quantity
        if transaction.transaction_type == TransactionType.RECEIPT:
            self.inventory.increase_stock(product_id, transaction.destination_warehouse_id, quantity)
        elif transaction.transaction_type == TransactionType.ISSUE:
            self.inventory.decrease_stock(product_id, transaction.source_warehouse_id, quantity)
        else:
            self.inventory.decrease_stock(product_id, transaction.source_warehouse_id, quantity)
            self.inventory.increase_stock(product_id, transaction.destination_warehouse_id, quantity)

    def create_transaction(
        self,
        product_id: int,
        source_warehouse_id: Optional[int],
        destination_warehouse_id: Optional[int],
        quantity: Any,
        transaction_type: Any,
        description: Optional[str] = None,
        user_id: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> Transaction:
        started = time.perf_counter()
        user_id = user_id or self.default_user
        logger.info(
            "Creating transaction: product=%s type=%s quantity=%s",
            product_id,
            transaction_type,
            quantity,
        )
        try:
            transaction_type = _coerce_type(transaction_type)
            with unit_of_work(self.db):
                product = self.products.get(product_id)
                if product is None:
                    raise NotFoundError(f"Product not found with id: {product_id}")
                if not product.is_available():
                    raise ValidationError(f"Product {product.code} is not active")

                source = self._resolve_warehouse(source_warehouse_id, "Source")
                destination = self._resolve_warehouse(destination_warehouse_id, "Destination")

                transaction = Transaction(
                    transaction_type=transaction_type,
                    product_id=product.id,
                    product=product,
                    source_warehouse_id=source.id if source else None,
                    source_warehouse=source,
                    destination_warehouse_id=destination.id if destination else None,
                    destination_warehouse=destination,
                    quantity=as_decimal(quantity),
                    timestamp=datetime.now(timezone.utc),
                    description=description,
                    user_id=user_id,
                    reference_number=reference_number,
                )
                validate_transaction(transaction)

                if source is not None:
                    available = self.inventory.get_quantity(product.id, source.id)
                    if available < transaction.quantity:
                        raise InsufficientStockError(available, transaction.quantity)

                self.transactions.save(transaction)
                self._apply_inventory_effect(transaction)
        except Exception as exc:
            logger.error("Transaction for product %s failed: %s", product_id, exc)
            self.audit.log_error(
                "CREATE_TRANSACTION",
                user_id,
                f"Failed to create transaction: product={product_id}, type={transaction_type}",
                exception=exc,
            )
            raise

        self.audit.log_action(
            "TRANSACTION_CREATED",
            user_id,
            f"Created {transaction_type.label} transaction: product={product.code}, "
            f"quantity={transaction.quantity}, {transaction.direction_description}",
            entity_id=transaction.id,
        )
        self.metrics.record_transaction(transaction_type.value)
        elapsed = time.perf_counter() - started
        self.metrics.observe_duration("create_transaction", elapsed)
        self.audit.log_performance_metric("CREATE_TRANSACTION", elapsed * 1000, user_id)
        logger.info("Transaction %s created", transaction.id)
        return transaction

    def list_all(self) -> list[Transaction]:
        return self.transactions.list_all()

    def get_transaction(self, transaction_id: int) -> Transaction:
        transaction = self.transactions.get(transaction_id)
        if transaction is None:
            logger.warning("Transaction %s not found", transaction_id)
            raise NotFoundError(f"Transaction not found with id: {transaction_id}")
        return transaction

    def list_by_product(self, product_id: int) -> list[Transaction]:
        return self.transactions.find_by_product(product_id)

    def list_by_warehouse(self, warehouse_id: int) -> list[Transaction]:
        return self.transactions.find_by_warehouse(warehouse_id)

    def list_by_period(self, start: datetime, end: datetime) -> list[Transaction]:
        start, end = utc_range(start, end)
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return self.transactions.find_between(start, end)

    def list_by_type(self, transaction_type: Any) -> list[Transaction]:
        return self.transactions.find_by_type(_coerce_type(transaction_type))

    def list_by_reference_number(self, reference_number: str) -> list[Transaction]:
        return self.transactions.find_by_reference_number(reference_number)

    def list_recent(self, limit: Optional[int] = None) -> list[Transaction]:
        return self.transactions.find_recent(limit or get_settings().RECENT_TRANSACTIONS_LIMIT)


__all__ = ["TransactionService"]

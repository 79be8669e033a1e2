from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.exceptions import ConflictError, NotFoundError
from warehouse_api.core.validation import validate_id, validate_product
from warehouse_api.database.unit_of_work import unit_of_work
from warehouse_api.models.product import Product
from warehouse_api.repositories import (
    InventoryItemRepository,
    ProductRepository,
    TransactionRepository,
)
from warehouse_api.schemas.product import ProductCreate, ProductUpdate
from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)

_AUDITED_FIELDS = ("code", "name", "category", "price", "is_active")


def _snapshot(product) -> dict:
    return {field: getattr(product, field) for field in _AUDITED_FIELDS}


class ProductService:
    def __init__(
        self,
        db: Session,
        audit: Optional[AuditService] = None,
        metrics: Optional[MetricsService] = None,
    ):
        self.db = db
        self.audit = audit or AuditService()
        self.metrics = metrics or MetricsService()
        self.products = ProductRepository(db)
        self.items = InventoryItemRepository(db)
        self.transactions = TransactionRepository(db)
        self.default_user = get_settings().DEFAULT_USER_ID

    def list_products(
        self,
        active: Optional[bool] = None,
        category: Optional[str] = None,
    ) -> list[Product]:
        if category:
            products = self.products.find_by_category(category)
        elif active is not None:
            return self.products.find_by_active(active)
        else:
            return self.products.list_all()
        if active is not None:
            products = [product for product in products if product.is_active == active]
        return products

    def get_product(self, product_id: int) -> Product:
        validate_id(product_id, "Product")
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product not found with id: {product_id}")
        return product

    def get_product_by_code(self, code: str) -> Product:
        product = self.products.find_by_code(code)
        if product is None:
            raise NotFoundError(f"Product not found with code: {code}")
        return product

    def search_products(self, term: str) -> list[Product]:
        if not term or not term.strip():
            return self.products.list_all()
        return self.products.search(term)

    def list_categories(self) -> list[str]:
        return self.products.find_all_categories()

    def create_product(self, payload: ProductCreate, user_id: Optional[str] = None) -> Product:
        validate_product(payload)
        with unit_of_work(self.db):
            if self.products.exists_by_code(payload.code):
                raise ConflictError(f"Product with code '{payload.code}' already exists")
            product = self.products.save(Product(**payload.model_dump()))

        self.metrics.record_product_operation("create")
        self.audit.log_data_change(
            "Product", product.id, "CREATE", user_id or self.default_user,
            new_values=_snapshot(product),
        )
        logger.info("Product %s created with id %s", product.code, product.id)
        return product

    def update_product(
        self,
        product_id: int,
        payload: ProductUpdate,
        user_id: Optional[str] = None,
    ) -> Product:
        with unit_of_work(self.db):
            product = self.get_product(product_id)
            old_values = _snapshot(product)

            current = ProductCreate.model_validate(product, from_attributes=True)
            draft = current.model_copy(update=payload.model_dump(exclude_unset=True))
            validate_product(draft)

            other = self.products.find_by_code(draft.code)
            if other is not None and other.id != product.id:
                raise ConflictError(f"Another product with code '{draft.code}' already exists")

            for field, value in draft.model_dump().items():
                setattr(product, field, value)
            self.products.save(product)

        self.metrics.record_product_operation("update")
        self.audit.log_data_change(
            "Product", product.id, "UPDATE", user_id or self.default_user,
            old_values=old_values, new_values=_snapshot(product),
        )
        return product

    def delete_product(self, product_id: int, user_id: Optional[str] = None) -> None:
        with unit_of_work(self.db):
            product = self.get_product(product_id)
            item_count = self.items.count_by_product(product_id)
            if item_count:
                raise ConflictError(
                    f"Cannot delete product {product.code}: it has {item_count} inventory item(s)"
                )
            if self.transactions.count_by_product(product_id):
                raise ConflictError(
                    f"Cannot delete product {product.code}: it is referenced by transactions"
                )
            old_values = _snapshot(product)
            self.products.delete(product)

        self.metrics.record_product_operation("delete")
        self.audit.log_data_change(
            "Product", product_id, "DELETE", user_id or self.default_user, old_values=old_values
        )


__all__ = ["ProductService"]

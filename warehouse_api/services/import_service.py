"""
Product import from an external SQL database.

The source only needs a ``products`` table with ``code``, ``description``,
``barcode`` and ``category`` columns; any SQLAlchemy URL works as long as the
matching driver is installed.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.exceptions import ValidationError
from warehouse_api.core.validation import validate_product
from warehouse_api.database.unit_of_work import unit_of_work
from warehouse_api.models.product import Product
from warehouse_api.repositories import ProductRepository
from warehouse_api.schemas.imports import ImportResult
from warehouse_api.schemas.product import ProductCreate
from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.metrics_service import MetricsService

logger = logging.getLogger(__name__)

SOURCE_COLUMNS = ("code", "description", "barcode", "category")
SOURCE_QUERY = text(f"SELECT {', '.join(SOURCE_COLUMNS)} FROM products")


def _text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class ImportService:
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

    def _fetch_rows(self, source_url: str, username: Optional[str], password: Optional[str]):
        url = make_url(source_url)
        if username is not None:
            url = url.set(username=username)
        if password is not None:
            url = url.set(password=password)
        source = create_engine(url)
        try:
            with source.connect() as conn:
                return [dict(row) for row in conn.execute(SOURCE_QUERY).mappings()]
        finally:
            source.dispose()

    def _import_row(self, values: dict) -> Product:
        description = values["description"] or ""
        draft = ProductCreate(
            code=values["code"] or "",
            name=description[:255],
            description=description,
            barcode=values["barcode"],
            category=values["category"] or "",
            price=Decimal("0.00"),
        )
        validate_product(draft)
        # One savepoint per row: a rejected insert leaves earlier rows intact.
        with self.db.begin_nested():
            return self.products.save(Product(**draft.model_dump()))

    def import_products(
        self,
        source_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> ImportResult:
        try:
            rows = self._fetch_rows(source_url, username, password)
        except (ArgumentError, SQLAlchemyError, ImportError) as exc:
            logger.error("Product import failed to read source: %s", exc)
            self.metrics.record_error(type(exc).__name__, "IMPORT_PRODUCTS")
            return ImportResult(
                success=False,
                message=f"Import failed: {exc}",
                errors=[str(exc) or "Unknown error occurred"],
            )

        imported = 0
        errors: list[str] = []
        with unit_of_work(self.db):
            known_codes = self.products.find_all_codes()
            for row in rows:
                values = {column: _text(row.get(column)) for column in SOURCE_COLUMNS}
                code = values["code"]
                if code in known_codes:
                    continue
                try:
                    self._import_row(values)
                except (ValidationError, SQLAlchemyError) as exc:
                    message = f"Error importing product {code}: {exc}"
                    logger.warning(message)
                    errors.append(message)
                    continue
                known_codes.add(code)
                imported += 1

        for _ in range(imported):
            self.metrics.record_product_operation("import")
        self.audit.log_action(
            "PRODUCTS_IMPORTED",
            user_id or get_settings().DEFAULT_USER_ID,
            f"Imported {imported} product(s) from {make_url(source_url).get_backend_name()}",
        )
        logger.info("Product import finished: %s imported, %s error(s)", imported, len(errors))
        return ImportResult(
            success=True,
            message=f"Import completed with {imported} products imported",
            imported_records=imported,
            errors=errors,
        )


__all__ = ["ImportService"]

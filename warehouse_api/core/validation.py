"""
Field-level and cross-field validation for products, warehouses and
stock movements.

Every ``validate_*`` function collects all violated rules and raises a single
:class:`ValidationError` listing them, so a caller sees the whole picture in
one round trip. The functions only read attributes, which lets them check ORM
entities and pydantic drafts alike.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from warehouse_api.core.constants import (
    BARCODE_PATTERN,
    DIMENSIONS_PATTERN,
    MAX_DECIMAL_PLACES,
    MAX_WAREHOUSE_CAPACITY,
    PRODUCT_CODE_PATTERN,
    ZERO,
)
from warehouse_api.core.exceptions import InvalidArgumentError, ValidationError
from warehouse_api.models.transaction import TransactionType


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"'{value}' is not a valid decimal number") from exc
    if not number.is_finite():
        raise ValidationError(f"'{value}' is not a finite decimal number")
    return number


def as_scaled_decimal(value: Any, label: str) -> Decimal:
    number = as_decimal(value)
    if decimal_places(number) > MAX_DECIMAL_PLACES:
        raise InvalidArgumentError(f"{label} may have at most 2 decimal places")
    return number


def decimal_places(value: Any) -> int:
    exponent = as_decimal(value).as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(0, -exponent)


def _check_text(errors, value, label, max_length):
    if _is_blank(value):
        errors.append(f"{label} must not be blank")
        return
    if len(value) > max_length:
        errors.append(f"{label} must not exceed {max_length} characters")


def validate_product(product: Any) -> None:
    errors: list[str] = []

    code = product.code
    if _is_blank(code):
        errors.append("Product code must not be blank")
    elif not PRODUCT_CODE_PATTERN.match(code):
        errors.append(
            "Product code may only contain upper-case letters, digits, hyphens and underscores"
        )

    _check_text(errors, product.description, "Product description", 1000)
    _check_text(errors, product.category, "Product category", 100)
    _check_text(errors, product.name, "Product name", 255)

    if product.price is None:
        errors.append("Product price is required")
    else:
        price = as_decimal(product.price)
        if price < ZERO:
            errors.append("Product price must not be negative")
        elif decimal_places(price) > MAX_DECIMAL_PLACES:
            errors.append("Product price may have at most 2 decimal places")

    barcode = getattr(product, "barcode", None)
    if not _is_blank(barcode) and not BARCODE_PATTERN.match(barcode):
        errors.append("Barcode must consist of 8 to 13 digits")

    weight = getattr(product, "weight", None)
    if weight is not None and as_decimal(weight) < ZERO:
        errors.append("Product weight must not be negative")

    dimensions = getattr(product, "dimensions", None)
    if not _is_blank(dimensions) and not DIMENSIONS_PATTERN.match(dimensions):
        errors.append(
            "Dimensions must use the format length x width x height (for example 10.5 x 20 x 30)"
        )

    if errors:
        raise ValidationError(errors, prefix="Product validation failed")


def validate_warehouse(warehouse: Any) -> None:
    errors: list[str] = []

    _check_text(errors, warehouse.name, "Warehouse name", 100)
    _check_text(errors, warehouse.location, "Warehouse location", 255)

    capacity = warehouse.capacity
    if capacity is None or capacity <= 0:
        errors.append("Warehouse capacity must be greater than 0")
    elif capacity > MAX_WAREHOUSE_CAPACITY:
        errors.append("Warehouse capacity must not exceed 1,000,000")

    description = getattr(warehouse, "description", None)
    if description is not None and len(description) > 1000:
        errors.append("Warehouse description must not exceed 1000 characters")

    if errors:
        raise ValidationError(errors, prefix="Warehouse validation failed")


def _reference_errors(transaction_type, source_id, destination_id) -> list[str]:
    errors = []
    if transaction_type == TransactionType.RECEIPT:
        if destination_id is None:
            errors.append("A receipt requires a destination warehouse")
        if source_id is not None:
            errors.append("A receipt must not have a source warehouse")
    elif transaction_type == TransactionType.ISSUE:
        if source_id is None:
            errors.append("An issue requires a source warehouse")
        if destination_id is not None:
            errors.append("An issue must not have a destination warehouse")
    elif transaction_type == TransactionType.TRANSFER:
        if source_id is None:
            errors.append("A transfer requires a source warehouse")
        if destination_id is None:
            errors.append("A transfer requires a destination warehouse")
        if source_id is not None and source_id == destination_id:
            errors.append("Source and destination warehouse must differ")
    else:
        errors.append(f"Unknown transaction type: {transaction_type}")
    return errors


def validate_transaction(transaction: Any) -> None:
    errors: list[str] = []

    quantity = transaction.quantity
    if quantity is None or as_decimal(quantity) <= ZERO:
        errors.append("Transaction quantity must be greater than 0")
    elif decimal_places(quantity) > MAX_DECIMAL_PLACES:
        errors.append("Transaction quantity may have at most 2 decimal places")

    errors.extend(
        _reference_errors(
            transaction.transaction_type,
            transaction.source_warehouse_id,
            transaction.destination_warehouse_id,
        )
    )

    description = getattr(transaction, "description", None)
    if description is not None and len(description) > 500:
        errors.append("Transaction description must not exceed 500 characters")

    user_id = getattr(transaction, "user_id", None)
    if user_id is not None and len(user_id) > 50:
        errors.append("User id must not exceed 50 characters")

    reference_number = getattr(transaction, "reference_number", None)
    if reference_number is not None and len(reference_number) > 100:
        errors.append("Reference number must not exceed 100 characters")

    if errors:
        raise ValidationError(errors, prefix="Transaction validation failed")


def validate_quantity(quantity: Any, operation: str) -> Decimal:
    value = as_decimal(quantity)
    if value <= ZERO:
        raise ValidationError(f"{operation}: quantity must be positive")
    if decimal_places(value) > MAX_DECIMAL_PLACES:
        raise ValidationError(f"{operation}: quantity may have at most 2 decimal places")
    return value


def validate_id(value: Any, entity_name: str) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{entity_name} id must be a positive integer")
    return value


__all__ = [
    "as_decimal",
    "as_scaled_decimal",
    "decimal_places",
    "validate_id",
    "validate_product",
    "validate_quantity",
    "validate_transaction",
    "validate_warehouse",
]

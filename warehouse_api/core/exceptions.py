from __future__ import annotations

from typing import Iterable, Optional


class WarehouseError(Exception):
    """Base class for domain errors raised by the service layer."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WarehouseError):
    status_code = 404


class ValidationError(WarehouseError):
    """Carries every violated rule, not just the first one."""

    status_code = 400

    def __init__(self, errors: Iterable[str] | str, prefix: Optional[str] = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        message = "; ".join(self.errors)
        if prefix:
            message = f"{prefix}: {message}"
        super().__init__(message)


class InvalidArgumentError(ValidationError):
    pass


class ConflictError(WarehouseError):
    status_code = 409


class InvalidStateError(ConflictError):
    pass


class InsufficientStockError(ConflictError):
    def __init__(self, available, required):
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock. Available: {available}, required: {required}"
        )


__all__ = [
    "ConflictError",
    "InsufficientStockError",
    "InvalidArgumentError",
    "InvalidStateError",
    "NotFoundError",
    "ValidationError",
    "WarehouseError",
]

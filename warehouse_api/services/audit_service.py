"""
Audit trail for business operations.

Entries go to a dedicated logger (``AUDIT`` by default) as single
pipe-separated lines, so they can be routed to their own handler or shipped
as-is by the JSON formatter.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from warehouse_api.config import get_settings
from warehouse_api.core.decorators import best_effort

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _format_values(values: Optional[Mapping[str, Any]]) -> str:
    if not values:
        return "{}"
    return "{" + ", ".join(f"{key}={value}" for key, value in values.items()) + "}"


class AuditService:
    def __init__(
        self,
        logger_name: Optional[str] = None,
        slow_threshold_ms: Optional[int] = None,
    ):
        settings = get_settings()
        self.audit_logger = logging.getLogger(logger_name or settings.AUDIT_LOGGER_NAME)
        self.slow_threshold_ms = (
            settings.SLOW_OPERATION_MS if slow_threshold_ms is None else slow_threshold_ms
        )

    @best_effort
    def log_action(
        self,
        action: str,
        user_id: str,
        details: str,
        entity_id: Optional[int] = None,
    ) -> None:
        parts = [f"ACTION: {action}", f"USER: {user_id}", f"TIME: {_now()}", f"DETAILS: {details}"]
        if entity_id is not None:
            parts.append(f"ENTITY_ID: {entity_id}")
        self.audit_logger.info(" | ".join(parts))
        logger.debug("Audit entry written: %s", action)

    @best_effort
    def log_error(
        self,
        action: str,
        user_id: str,
        error: str,
        exception: Optional[BaseException] = None,
    ) -> None:
        parts = [f"ERROR: {action}", f"USER: {user_id}", f"TIME: {_now()}", f"DESCRIPTION: {error}"]
        if exception is not None:
            parts.append(f"EXCEPTION: {type(exception).__name__}")
            parts.append(f"MESSAGE: {exception}")
        self.audit_logger.error(" | ".join(parts))

    @best_effort
    def log_security_event(
        self,
        event: str,
        user_id: str,
        ip_address: Optional[str] = None,
        details: str = "",
    ) -> None:
        parts = [f"SECURITY: {event}", f"USER: {user_id}", f"TIME: {_now()}"]
        if ip_address:
            parts.append(f"IP: {ip_address}")
        if details:
            parts.append(f"DETAILS: {details}")
        self.audit_logger.warning(" | ".join(parts))

    @best_effort
    def log_performance_metric(
        self,
        operation: str,
        duration_ms: float,
        user_id: Optional[str] = None,
    ) -> None:
        parts = [f"PERFORMANCE: {operation}", f"DURATION: {duration_ms:.0f}ms", f"TIME: {_now()}"]
        if user_id:
            parts.append(f"USER: {user_id}")
        message = " | ".join(parts)
        if duration_ms > self.slow_threshold_ms:
            self.audit_logger.warning("SLOW_OPERATION: %s", message)
        else:
            self.audit_logger.info(message)

    @best_effort
    def log_data_change(
        self,
        entity_type: str,
        entity_id: Optional[int],
        operation: str,
        user_id: str,
        old_values: Optional[Mapping[str, Any]] = None,
        new_values: Optional[Mapping[str, Any]] = None,
    ) -> None:
        parts = [
            f"DATA_CHANGE: {entity_type}",
            f"ID: {entity_id}",
            f"OPERATION: {operation}",
            f"USER: {user_id}",
            f"TIME: {_now()}",
        ]
        if old_values:
            parts.append(f"OLD: {_format_values(old_values)}")
        if new_values:
            parts.append(f"NEW: {_format_values(new_values)}")
        self.audit_logger.info(" | ".join(parts))


__all__ = ["AuditService"]

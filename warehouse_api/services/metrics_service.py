"""
Prometheus instruments for warehouse operations.

The service owns its instruments on the registry it is given, so tests and
multiple app instances never collide on the process-wide default registry.
Recording is best effort: an instrument failure is logged and swallowed.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from warehouse_api.core.decorators import best_effort


class MetricsService:
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.transactions = Counter(
            "warehouse_transactions_total",
            "Stock movements posted",
            ["type"],
            registry=self.registry,
        )
        self.product_operations = Counter(
            "warehouse_product_operations_total",
            "Product catalogue operations",
            ["operation"],
            registry=self.registry,
        )
        self.inventory_level = Gauge(
            "warehouse_inventory_level",
            "Total quantity held per warehouse",
            ["warehouse_id"],
            registry=self.registry,
        )
        self.inventory_checks = Counter(
            "warehouse_inventory_checks_total",
            "Inventory checks per warehouse",
            ["warehouse_id"],
            registry=self.registry,
        )
        self.inventory_last_check = Gauge(
            "warehouse_inventory_last_check_timestamp_seconds",
            "Unix time of the last inventory check per warehouse",
            ["warehouse_id"],
            registry=self.registry,
        )
        self.low_stock_alerts = Counter(
            "warehouse_low_stock_alerts_total",
            "Low stock alerts per product",
            ["product_id"],
            registry=self.registry,
        )
        self.inventory_updates = Counter(
            "warehouse_inventory_updates_total",
            "Inventory quantity updates",
            ["warehouse_id", "product_id"],
            registry=self.registry,
        )
        self.api_requests = Counter(
            "warehouse_api_requests_total",
            "HTTP requests served",
            ["endpoint", "method", "status"],
            registry=self.registry,
        )
        self.errors = Counter(
            "warehouse_errors_total",
            "Errors raised by operations",
            ["error_type", "operation"],
            registry=self.registry,
        )
        self.operation_duration = Histogram(
            "warehouse_operation_duration_seconds",
            "Duration of service operations",
            ["operation"],
            registry=self.registry,
        )

    @best_effort
    def record_transaction(self, transaction_type: str) -> None:
        self.transactions.labels(type=getattr(transaction_type, "value", str(transaction_type))).inc()

    @best_effort
    def record_product_operation(self, operation: str) -> None:
        self.product_operations.labels(operation=operation).inc()

    @best_effort
    def update_inventory_level(self, warehouse_id: int, level: float) -> None:
        self.inventory_level.labels(warehouse_id=str(warehouse_id)).set(float(level))

    @best_effort
    def record_inventory_check(self, warehouse_id: int) -> None:
        self.inventory_checks.labels(warehouse_id=str(warehouse_id)).inc()
        self.inventory_last_check.labels(warehouse_id=str(warehouse_id)).set_to_current_time()

    @best_effort
    def record_low_stock_alert(self, product_id: int) -> None:
        self.low_stock_alerts.labels(product_id=str(product_id)).inc()

    @best_effort
    def record_inventory_update(self, warehouse_id: int, product_id: int) -> None:
        self.inventory_updates.labels(
            warehouse_id=str(warehouse_id), product_id=str(product_id)
        ).inc()

    @best_effort
    def record_api_request(self, endpoint: str, method: str, status_code: int) -> None:
        self.api_requests.labels(endpoint=endpoint, method=method, status=str(status_code)).inc()

    @best_effort
    def record_error(self, error_type: str, operation: str) -> None:
        self.errors.labels(error_type=error_type, operation=operation).inc()

    @best_effort
    def observe_duration(self, operation: str, seconds: float) -> None:
        self.operation_duration.labels(operation=operation).observe(seconds)

    @contextmanager
    def time_operation(self, operation: str) -> Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self.observe_duration(operation, time.perf_counter() - started)


__all__ = ["MetricsService"]

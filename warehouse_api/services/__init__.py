from warehouse_api.services.audit_service import AuditService
from warehouse_api.services.import_service import ImportService
from warehouse_api.services.inventory_service import InventoryService
from warehouse_api.services.metrics_service import MetricsService
from warehouse_api.services.product_service import ProductService
from warehouse_api.services.report_service import ReportService
from warehouse_api.services.transaction_service import TransactionService
from warehouse_api.services.warehouse_service import WarehouseService

__all__ = [
    "AuditService",
    "ImportService",
    "InventoryService",
    "MetricsService",
    "ProductService",
    "ReportService",
    "TransactionService",
    "WarehouseService",
]

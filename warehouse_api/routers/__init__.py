from warehouse_api.routers.health import router as health_router
from warehouse_api.routers.imports import router as imports_router
from warehouse_api.routers.inventory import router as inventory_router
from warehouse_api.routers.metrics import router as metrics_router
from warehouse_api.routers.products import router as products_router
from warehouse_api.routers.reports import router as reports_router
from warehouse_api.routers.transactions import router as transactions_router
from warehouse_api.routers.warehouses import router as warehouses_router

__all__ = [
    "health_router",
    "imports_router",
    "inventory_router",
    "metrics_router",
    "products_router",
    "reports_router",
    "transactions_router",
    "warehouses_router",
]

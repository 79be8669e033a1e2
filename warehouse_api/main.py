import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from prometheus_client import CollectorRegistry

from warehouse_api.config import Settings, get_settings
from warehouse_api.core.logging import setup_logging
from warehouse_api.database import engine, init_db
from warehouse_api.errors import ERROR_RESPONSES, register_exception_handlers
from warehouse_api.routers import (
    health_router,
    imports_router,
    inventory_router,
    metrics_router,
    products_router,
    reports_router,
    transactions_router,
    warehouses_router,
)
from warehouse_api.services import AuditService, MetricsService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db(engine)
    logger.info("Database schema ready")
    yield


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[CollectorRegistry] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.audit = AuditService()
    app.state.metrics = MetricsService(registry)

    register_exception_handlers(app)

    if settings.METRICS_ENABLED:
        @app.middleware("http")
        async def record_api_request(request: Request, call_next):
            response = await call_next(request)
            route = request.scope.get("route")
            endpoint = getattr(route, "path", "unmatched")
            app.state.metrics.record_api_request(endpoint, request.method, response.status_code)
            return response

        app.include_router(metrics_router)

    app.include_router(health_router)
    for router in (
        products_router,
        warehouses_router,
        inventory_router,
        transactions_router,
        reports_router,
        imports_router,
    ):
        app.include_router(router, prefix=settings.API_PREFIX, responses=ERROR_RESPONSES)
    return app


setup_logging()
app = create_app()


__all__ = ["app", "create_app"]

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from warehouse_api.config import get_settings
from warehouse_api.core.security import authenticate_request
from warehouse_api.database.session import get_db
from warehouse_api.services import (
    AuditService,
    ImportService,
    InventoryService,
    MetricsService,
    ProductService,
    ReportService,
    TransactionService,
    WarehouseService,
)


def require_auth(
    request: Request,
    api_key: Optional[str] = Header(None, alias="X-API-Key"),
    authorization: Optional[str] = Header(None),
):
    settings = get_settings()
    api_key = api_key or request.headers.get(settings.API_KEY_HEADER)
    try:
        return authenticate_request(api_key=api_key, authorization=authorization)
    except HTTPException as exc:
        get_audit_service(request).log_security_event(
            "AUTHENTICATION_FAILED",
            "anonymous",
            ip_address=request.client.host if request.client else None,
            details=f"{request.method} {request.url.path}: {exc.detail}",
        )
        raise


def get_current_user(principal: Optional[dict] = Depends(require_auth)) -> str:
    if principal and principal.get("user_id"):
        return principal["user_id"]
    return get_settings().DEFAULT_USER_ID


def get_audit_service(request: Request) -> AuditService:
    return request.app.state.audit


def get_metrics_service(request: Request) -> MetricsService:
    return request.app.state.metrics


def get_inventory_service(
    db: Session = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    metrics: MetricsService = Depends(get_metrics_service),
) -> InventoryService:
    return InventoryService(db, audit, metrics)


def get_transaction_service(
    db: Session = Depends(get_db),
    inventory: InventoryService = Depends(get_inventory_service),
    audit: AuditService = Depends(get_audit_service),
    metrics: MetricsService = Depends(get_metrics_service),
) -> TransactionService:
    return TransactionService(db, inventory, audit, metrics)


def get_product_service(
    db: Session = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    metrics: MetricsService = Depends(get_metrics_service),
) -> ProductService:
    return ProductService(db, audit, metrics)


def get_warehouse_service(
    db: Session = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
) -> WarehouseService:
    return WarehouseService(db, audit)


def get_report_service(
    db: Session = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    metrics: MetricsService = Depends(get_metrics_service),
) -> ReportService:
    return ReportService(db, audit, metrics)


def get_import_service(
    db: Session = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
    metrics: MetricsService = Depends(get_metrics_service),
) -> ImportService:
    return ImportService(db, audit, metrics)


__all__ = [
    "get_audit_service",
    "get_current_user",
    "get_db",
    "get_import_service",
    "get_inventory_service",
    "get_metrics_service",
    "get_product_service",
    "get_report_service",
    "get_transaction_service",
    "get_warehouse_service",
    "require_auth",
]

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from warehouse_api.dependencies import get_current_user, get_report_service, require_auth
from warehouse_api.services import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(require_auth)])


def _render(report: dict) -> JSONResponse:
    # Quantities and money keep their exact decimal text.
    return JSONResponse(content=jsonable_encoder(report, custom_encoder={Decimal: str}))


@router.get("/inventory/{warehouse_id}")
def inventory_report(
    warehouse_id: int,
    service: ReportService = Depends(get_report_service),
    user_id: str = Depends(get_current_user),
):
    return _render(service.generate_inventory_report(warehouse_id, user_id=user_id))


@router.get("/inventory")
def overall_inventory_report(
    service: ReportService = Depends(get_report_service),
    user_id: str = Depends(get_current_user),
):
    return _render(service.generate_overall_inventory_report(user_id=user_id))


@router.get("/transactions")
def transaction_report(
    start: datetime,
    end: datetime,
    service: ReportService = Depends(get_report_service),
):
    return _render(service.generate_transaction_report(start, end))


@router.get("/summary")
def system_summary(service: ReportService = Depends(get_report_service)):
    return _render(service.generate_system_summary_report())


__all__ = ["router"]

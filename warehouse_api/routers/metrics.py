from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from warehouse_api.dependencies import get_metrics_service
from warehouse_api.services import MetricsService

router = APIRouter(tags=["Metrics"])


@router.get("/metrics")
def metrics(service: MetricsService = Depends(get_metrics_service)) -> Response:
    return Response(content=generate_latest(service.registry), media_type=CONTENT_TYPE_LATEST)


__all__ = ["router"]

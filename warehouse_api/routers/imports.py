from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from warehouse_api.dependencies import get_current_user, get_import_service, require_auth
from warehouse_api.schemas.imports import ImportRequest, ImportResult
from warehouse_api.services import ImportService

router = APIRouter(prefix="/import", tags=["Import"], dependencies=[Depends(require_auth)])


@router.post("/products", response_model=ImportResult, responses={400: {"model": ImportResult}})
def import_products(
    payload: ImportRequest,
    service: ImportService = Depends(get_import_service),
    user_id: str = Depends(get_current_user),
):
    result = service.import_products(
        payload.source_url,
        username=payload.username,
        password=payload.password,
        user_id=user_id,
    )
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump())
    return result


__all__ = ["router"]

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from warehouse_api.dependencies import get_current_user, get_warehouse_service, require_auth
from warehouse_api.schemas.warehouse import (
    WarehouseCreate,
    WarehouseInventorySummary,
    WarehouseRead,
    WarehouseUpdate,
)
from warehouse_api.services import WarehouseService

router = APIRouter(
    prefix="/warehouses", tags=["Warehouses"], dependencies=[Depends(require_auth)]
)


@router.get("", response_model=List[WarehouseRead])
def list_warehouses(
    q: Optional[str] = None,
    service: WarehouseService = Depends(get_warehouse_service),
):
    return service.search_warehouses(q)


@router.get("/{warehouse_id}", response_model=WarehouseRead)
def get_warehouse(warehouse_id: int, service: WarehouseService = Depends(get_warehouse_service)):
    return service.get_warehouse(warehouse_id)


@router.get("/{warehouse_id}/summary", response_model=WarehouseInventorySummary)
def get_inventory_summary(
    warehouse_id: int,
    service: WarehouseService = Depends(get_warehouse_service),
):
    return service.get_inventory_summary(warehouse_id)


@router.post("", response_model=WarehouseRead, status_code=status.HTTP_201_CREATED)
def create_warehouse(
    payload: WarehouseCreate,
    service: WarehouseService = Depends(get_warehouse_service),
    user_id: str = Depends(get_current_user),
):
    return service.create_warehouse(payload, user_id=user_id)


@router.put("/{warehouse_id}", response_model=WarehouseRead)
def update_warehouse(
    warehouse_id: int,
    payload: WarehouseUpdate,
    service: WarehouseService = Depends(get_warehouse_service),
    user_id: str = Depends(get_current_user),
):
    return service.update_warehouse(warehouse_id, payload, user_id=user_id)


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_warehouse(
    warehouse_id: int,
    service: WarehouseService = Depends(get_warehouse_service),
    user_id: str = Depends(get_current_user),
):
    service.delete_warehouse(warehouse_id, user_id=user_id)


__all__ = ["router"]

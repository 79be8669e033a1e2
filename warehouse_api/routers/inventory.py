from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query, status

from warehouse_api.dependencies import get_current_user, get_inventory_service, require_auth
from warehouse_api.schemas.inventory import (
    InventoryAdjustment,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryLevelsUpdate,
    QuantityRead,
    QuantityUpdate,
)
from warehouse_api.services import InventoryService

router = APIRouter(prefix="/inventory", tags=["Inventory"], dependencies=[Depends(require_auth)])


@router.get("", response_model=List[InventoryItemRead])
def list_inventory(service: InventoryService = Depends(get_inventory_service)):
    return service.list_all()


@router.get("/low-stock", response_model=List[InventoryItemRead])
def check_low_stock(
    threshold: Decimal = Query(..., ge=0),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.check_low_stock(threshold)


@router.get("/below-minimum", response_model=List[InventoryItemRead])
def check_below_minimum(service: InventoryService = Depends(get_inventory_service)):
    return service.check_below_minimum_level()


@router.get("/above-maximum", response_model=List[InventoryItemRead])
def check_above_maximum(service: InventoryService = Depends(get_inventory_service)):
    return service.check_above_maximum_level()


@router.get("/warehouse/{warehouse_id}", response_model=List[InventoryItemRead])
def list_by_warehouse(warehouse_id: int, service: InventoryService = Depends(get_inventory_service)):
    return service.list_by_warehouse(warehouse_id)


@router.get("/product/{product_id}", response_model=List[InventoryItemRead])
def list_by_product(product_id: int, service: InventoryService = Depends(get_inventory_service)):
    return service.list_by_product(product_id)


@router.get("/{item_id}", response_model=InventoryItemRead)
def get_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    return service.get_item(item_id)


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
    user_id: str = Depends(get_current_user),
):
    return service.create_inventory_item(
        payload.product_id,
        payload.warehouse_id,
        payload.quantity,
        minimum_level=payload.minimum_level,
        maximum_level=payload.maximum_level,
        user_id=user_id,
    )


# Registered before the two-segment quantity route so "levels" is not read as an id.
@router.put("/{item_id}/levels", response_model=InventoryItemRead)
def update_levels(
    item_id: int,
    payload: InventoryLevelsUpdate,
    service: InventoryService = Depends(get_inventory_service),
    user_id: str = Depends(get_current_user),
):
    return service.update_levels(
        item_id, payload.minimum_level, payload.maximum_level, user_id=user_id
    )


@router.put("/{product_id}/{warehouse_id}", response_model=InventoryItemRead)
def set_quantity(
    product_id: int,
    warehouse_id: int,
    payload: QuantityUpdate,
    service: InventoryService = Depends(get_inventory_service),
    user_id: str = Depends(get_current_user),
):
    return service.set_quantity(product_id, warehouse_id, payload.quantity, user_id=user_id)


@router.post("/{product_id}/{warehouse_id}/adjust", response_model=InventoryItemRead)
def adjust(
    product_id: int,
    warehouse_id: int,
    payload: InventoryAdjustment,
    service: InventoryService = Depends(get_inventory_service),
    user_id: str = Depends(get_current_user),
):
    return service.adjust(product_id, warehouse_id, payload.adjustment, user_id=user_id)


@router.get("/{product_id}/{warehouse_id}/quantity", response_model=QuantityRead)
def get_quantity(
    product_id: int,
    warehouse_id: int,
    service: InventoryService = Depends(get_inventory_service),
):
    return QuantityRead(
        product_id=product_id,
        warehouse_id=warehouse_id,
        quantity=service.get_quantity(product_id, warehouse_id),
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    service: InventoryService = Depends(get_inventory_service),
    user_id: str = Depends(get_current_user),
):
    service.delete_inventory_item(item_id, user_id=user_id)


__all__ = ["router"]

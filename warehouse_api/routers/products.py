from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from warehouse_api.dependencies import get_current_user, get_product_service, require_auth
from warehouse_api.schemas.product import ProductCreate, ProductRead, ProductUpdate
from warehouse_api.services import ProductService

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(require_auth)])


@router.get("", response_model=List[ProductRead])
def list_products(
    active: Optional[bool] = None,
    category: Optional[str] = None,
    q: Optional[str] = Query(None, description="Search name, code or description"),
    service: ProductService = Depends(get_product_service),
):
    if q:
        return service.search_products(q)
    return service.list_products(active=active, category=category)


@router.get("/categories", response_model=List[str])
def list_categories(service: ProductService = Depends(get_product_service)):
    return service.list_categories()


@router.get("/code/{code}", response_model=ProductRead)
def get_product_by_code(code: str, service: ProductService = Depends(get_product_service)):
    return service.get_product_by_code(code)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return service.get_product(product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
    user_id: str = Depends(get_current_user),
):
    return service.create_product(payload, user_id=user_id)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    user_id: str = Depends(get_current_user),
):
    return service.update_product(product_id, payload, user_id=user_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    user_id: str = Depends(get_current_user),
):
    service.delete_product(product_id, user_id=user_id)


__all__ = ["router"]

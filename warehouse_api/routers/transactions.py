from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from warehouse_api.dependencies import get_current_user, get_transaction_service, require_auth
from warehouse_api.models.transaction import TransactionType
from warehouse_api.schemas.transaction import TransactionCreate, TransactionRead
from warehouse_api.services import TransactionService

router = APIRouter(
    prefix="/transactions", tags=["Transactions"], dependencies=[Depends(require_auth)]
)


@router.get("", response_model=List[TransactionRead])
def list_transactions(
    transaction_type: Optional[TransactionType] = Query(None, alias="type"),
    reference_number: Optional[str] = None,
    service: TransactionService = Depends(get_transaction_service),
):
    if transaction_type is not None:
        return service.list_by_type(transaction_type)
    if reference_number:
        return service.list_by_reference_number(reference_number)
    return service.list_all()


@router.get("/recent", response_model=List[TransactionRead])
def list_recent(
    limit: Optional[int] = Query(None, ge=1, le=500),
    service: TransactionService = Depends(get_transaction_service),
):
    return service.list_recent(limit)


@router.get("/period", response_model=List[TransactionRead])
def list_by_period(
    start: datetime,
    end: datetime,
    service: TransactionService = Depends(get_transaction_service),
):
    return service.list_by_period(start, end)


@router.get("/product/{product_id}", response_model=List[TransactionRead])
def list_by_product(product_id: int, service: TransactionService = Depends(get_transaction_service)):
    return service.list_by_product(product_id)


@router.get("/warehouse/{warehouse_id}", response_model=List[TransactionRead])
def list_by_warehouse(
    warehouse_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    return service.list_by_warehouse(warehouse_id)


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    return service.get_transaction(transaction_id)


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
    user_id: str = Depends(get_current_user),
):
    return service.create_transaction(
        product_id=payload.product_id,
        source_warehouse_id=payload.source_warehouse_id,
        destination_warehouse_id=payload.destination_warehouse_id,
        quantity=payload.quantity,
        transaction_type=payload.transaction_type,
        description=payload.description,
        user_id=payload.user_id or user_id,
        reference_number=payload.reference_number,
    )


__all__ = ["router"]

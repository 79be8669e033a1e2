from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from warehouse_api.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    product_id: int
    source_warehouse_id: Optional[int] = None
    destination_warehouse_id: Optional[int] = None
    quantity: Decimal
    transaction_type: TransactionType
    description: Optional[str] = None
    user_id: Optional[str] = None
    reference_number: Optional[str] = None


class TransactionRead(BaseModel):
    id: int
    transaction_type: TransactionType
    product_id: int
    source_warehouse_id: Optional[int] = None
    destination_warehouse_id: Optional[int] = None
    quantity: Decimal
    timestamp: datetime
    description: Optional[str] = None
    user_id: Optional[str] = None
    reference_number: Optional[str] = None
    direction_description: str

    model_config = ConfigDict(from_attributes=True)

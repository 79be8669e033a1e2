from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductBase(BaseModel):
    code: str
    name: str
    description: str
    category: str
    price: Decimal = Decimal("0.00")
    barcode: Optional[str] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[str] = None
    is_active: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    barcode: Optional[str] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[str] = None
    is_active: Optional[bool] = None


class ProductRead(ProductBase):
    id: int
    full_name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    id: int
    code: str
    name: str

    model_config = ConfigDict(from_attributes=True)

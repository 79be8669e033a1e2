from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from warehouse_api.models.inventory_item import StockStatus
from warehouse_api.schemas.product import ProductSummary
from warehouse_api.schemas.warehouse import WarehouseSummary


class InventoryItemCreate(BaseModel):
    product_id: int
    warehouse_id: int
    quantity: Decimal
    minimum_level: Optional[Decimal] = None
    maximum_level: Optional[Decimal] = None


class InventoryLevelsUpdate(BaseModel):
    minimum_level: Optional[Decimal] = None
    maximum_level: Optional[Decimal] = None


class QuantityUpdate(BaseModel):
    quantity: Decimal


class InventoryAdjustment(BaseModel):
    adjustment: Decimal


class InventoryItemRead(BaseModel):
    id: int
    product_id: int
    warehouse_id: int
    product: ProductSummary
    warehouse: WarehouseSummary
    quantity: Decimal
    minimum_level: Optional[Decimal] = None
    maximum_level: Optional[Decimal] = None
    stock_status: StockStatus
    value: Decimal
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuantityRead(BaseModel):
    product_id: int
    warehouse_id: int
    quantity: Decimal

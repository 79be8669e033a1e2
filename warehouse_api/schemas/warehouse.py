from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class WarehouseBase(BaseModel):
    name: str
    location: str
    capacity: float
    description: Optional[str] = None
    is_active: bool = True


class WarehouseCreate(WarehouseBase):
    pass


class WarehouseUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[float] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class WarehouseRead(WarehouseBase):
    id: int
    full_name: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WarehouseSummary(BaseModel):
    id: int
    name: str
    location: str

    model_config = ConfigDict(from_attributes=True)


class WarehouseInventorySummary(BaseModel):
    warehouse_id: int
    warehouse_name: str
    total_products: int
    total_value: Decimal
    low_stock_count: int
    excess_stock_count: int
    utilization_percentage: float

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship

from warehouse_api.database.base import Base


class StockStatus(str, enum.Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    EXCESS = "EXCESS"


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False)

    quantity = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    minimum_level = Column(Numeric(10, 2))
    maximum_level = Column(Numeric(10, 2))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    version = Column(Integer, nullable=False)

    product = relationship(
        "Product", back_populates="inventory_items", lazy="joined", innerjoin=True
    )
    warehouse = relationship(
        "Warehouse", back_populates="inventory_items", lazy="joined", innerjoin=True
    )

    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uk_product_warehouse"),
    )
    __mapper_args__ = {"version_id_col": version}

    def is_below_minimum_level(self) -> bool:
        if self.minimum_level is None:
            return False
        return self.quantity < self.minimum_level

    def is_above_maximum_level(self) -> bool:
        if self.maximum_level is None:
            return False
        return self.quantity > self.maximum_level

    @property
    def stock_status(self) -> StockStatus:
        if self.is_below_minimum_level():
            return StockStatus.LOW
        if self.is_above_maximum_level():
            return StockStatus.EXCESS
        return StockStatus.NORMAL

    @property
    def value(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.product.price)


__all__ = ["InventoryItem", "StockStatus"]

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from warehouse_api.database.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)

    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    barcode = Column(String(100))
    weight = Column(Numeric(8, 3))
    # "length x width x height" in centimetres
    dimensions = Column(String(50))

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    inventory_items = relationship("InventoryItem", back_populates="product", lazy="select")
    transactions = relationship("Transaction", back_populates="product", lazy="select")

    __table_args__ = (
        Index("idx_product_barcode", "barcode"),
        Index("idx_product_category", "category"),
    )

    def is_available(self) -> bool:
        return bool(self.is_active)

    @property
    def full_name(self) -> str:
        return f"[{self.code}] {self.name}"

    def calculate_volume(self):
        if not self.dimensions:
            return None
        parts = [part.strip() for part in self.dimensions.split("x")]
        if len(parts) != 3:
            return None
        try:
            length, width, height = (Decimal(part) for part in parts)
        except InvalidOperation:
            return None
        return length * width * height


__all__ = ["Product"]

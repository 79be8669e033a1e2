from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from warehouse_api.database.base import Base


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True)

    name = Column(String(100), nullable=False, unique=True)
    location = Column(String(255), nullable=False)
    capacity = Column(Float, nullable=False)
    description = Column(Text)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(DateTime(timezone=True))

    inventory_items = relationship("InventoryItem", back_populates="warehouse", lazy="select")
    outgoing_transactions = relationship(
        "Transaction",
        foreign_keys="Transaction.source_warehouse_id",
        back_populates="source_warehouse",
        lazy="select",
    )
    incoming_transactions = relationship(
        "Transaction",
        foreign_keys="Transaction.destination_warehouse_id",
        back_populates="destination_warehouse",
        lazy="select",
    )

    __table_args__ = (
        Index("idx_warehouse_location", "location"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.name} ({self.location})"

    @property
    def total_transaction_count(self) -> int:
        return len(self.outgoing_transactions) + len(self.incoming_transactions)


__all__ = ["Warehouse"]

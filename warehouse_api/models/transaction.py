import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from warehouse_api.database.base import Base


class TransactionType(str, enum.Enum):
    RECEIPT = "RECEIPT"
    TRANSFER = "TRANSFER"
    ISSUE = "ISSUE"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Transaction(Base):
    """Append-only ledger row for one stock movement."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)

    transaction_type = Column(
        Enum(TransactionType, name="transaction_type", native_enum=False, length=20),
        nullable=False,
    )

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    source_warehouse_id = Column(Integer, ForeignKey("warehouses.id"))
    destination_warehouse_id = Column(Integer, ForeignKey("warehouses.id"))

    quantity = Column(Numeric(10, 2), nullable=False)
    timestamp = Column(
        "transaction_timestamp",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    description = Column(String(500))
    user_id = Column(String(50))
    reference_number = Column(String(100))

    product = relationship("Product", back_populates="transactions", lazy="joined")
    source_warehouse = relationship(
        "Warehouse",
        foreign_keys=[source_warehouse_id],
        back_populates="outgoing_transactions",
        lazy="joined",
    )
    destination_warehouse = relationship(
        "Warehouse",
        foreign_keys=[destination_warehouse_id],
        back_populates="incoming_transactions",
        lazy="joined",
    )

    __table_args__ = (
        Index("idx_transaction_timestamp", "transaction_timestamp"),
        Index("idx_transaction_product", "product_id"),
        Index("idx_transaction_type", "transaction_type"),
    )

    def is_valid(self) -> bool:
        if self.transaction_type == TransactionType.RECEIPT:
            return self.destination_warehouse_id is not None
        if self.transaction_type == TransactionType.ISSUE:
            return self.source_warehouse_id is not None
        return (
            self.source_warehouse_id is not None
            and self.destination_warehouse_id is not None
            and self.source_warehouse_id != self.destination_warehouse_id
        )

    @property
    def direction_description(self) -> str:
        source = self.source_warehouse.name if self.source_warehouse else "Not set"
        destination = self.destination_warehouse.name if self.destination_warehouse else "Not set"
        if self.transaction_type == TransactionType.RECEIPT:
            return f"Receipt -> {destination}"
        if self.transaction_type == TransactionType.ISSUE:
            return f"{source} -> Issue"
        return f"{source} -> {destination}"


__all__ = ["Transaction", "TransactionType"]

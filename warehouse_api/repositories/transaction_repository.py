from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, or_, select

from warehouse_api.models.transaction import Transaction, TransactionType
from warehouse_api.repositories.base import Repository


class TransactionRepository(Repository[Transaction]):
    model = Transaction

    def find_by_product(self, product_id: int) -> list[Transaction]:
        return self._all(
            select(Transaction)
            .where(Transaction.product_id == product_id)
            .order_by(Transaction.timestamp, Transaction.id)
        )

    def find_by_warehouse(self, warehouse_id: int) -> list[Transaction]:
        stmt = (
            select(Transaction)
            .where(
                or_(
                    Transaction.source_warehouse_id == warehouse_id,
                    Transaction.destination_warehouse_id == warehouse_id,
                )
            )
            .order_by(Transaction.timestamp, Transaction.id)
        )
        return self._all(stmt)

    def find_by_type(self, transaction_type: TransactionType) -> list[Transaction]:
        return self._all(
            select(Transaction)
            .where(Transaction.transaction_type == transaction_type)
            .order_by(Transaction.timestamp, Transaction.id)
        )

    def find_by_reference_number(self, reference_number: str) -> list[Transaction]:
        return self._all(
            select(Transaction)
            .where(Transaction.reference_number == reference_number)
            .order_by(Transaction.timestamp, Transaction.id)
        )

    def find_between(self, start: datetime, end: datetime) -> list[Transaction]:
        return self._all(
            select(Transaction)
            .where(Transaction.timestamp.between(start, end))
            .order_by(Transaction.timestamp, Transaction.id)
        )

    def find_recent(self, limit: int = 10) -> list[Transaction]:
        return self._all(
            select(Transaction)
            .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
            .limit(limit)
        )

    def total_quantity_by_type(self, transaction_type: TransactionType) -> Decimal:
        stmt = select(func.coalesce(func.sum(Transaction.quantity), 0)).where(
            Transaction.transaction_type == transaction_type
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))

    def count_by_product(self, product_id: int) -> int:
        stmt = select(func.count(Transaction.id)).where(Transaction.product_id == product_id)
        return self.db.execute(stmt).scalar_one()


__all__ = ["TransactionRepository"]

import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

from prometheus_client import CollectorRegistry
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from warehouse_api.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from warehouse_api.database.base import Base
from warehouse_api.database.engine import build_engine
from warehouse_api.models import Product, Transaction, TransactionType, Warehouse
from warehouse_api.services import AuditService, MetricsService, TransactionService


class TransactionServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.db = Session()

        self.product = Product(
            code="SKU1", name="Widget", description="Widget", category="Parts", price=Decimal("1.00")
        )
        self.w1 = Warehouse(name="W1", location="Riga", capacity=1000)
        self.w2 = Warehouse(name="W2", location="Tallinn", capacity=1000)
        self.db.add_all([self.product, self.w1, self.w2])
        self.db.commit()

        self.registry = CollectorRegistry()
        self.service = TransactionService(
            self.db, audit=AuditService(), metrics=MetricsService(self.registry)
        )
        self.inventory = self.service.inventory

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _ledger_size(self):
        return self.db.execute(select(func.count(Transaction.id))).scalar_one()

    def _receive(self, quantity, warehouse=None):
        warehouse = warehouse or self.w1
        return self.service.create_transaction(
            self.product.id, None, warehouse.id, Decimal(quantity), TransactionType.RECEIPT
        )

    def test_receipt_creates_inventory(self):
        transaction = self._receive("50")
        self.assertEqual(transaction.user_id, "SYSTEM")
        self.assertEqual(transaction.direction_description, "Receipt -> W1")
        self.assertTrue(transaction.is_valid())
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("50"))
        self.assertEqual(
            self.registry.get_sample_value("warehouse_transactions_total", {"type": "RECEIPT"}), 1.0
        )

    def test_issue_then_oversized_issue_rejected(self):
        self._receive("50")
        issue = self.service.create_transaction(
            self.product.id, self.w1.id, None, Decimal("30"), "ISSUE"
        )
        self.assertEqual(issue.direction_description, "W1 -> Issue")
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("20"))

        with self.assertRaises(InsufficientStockError) as ctx:
            self.service.create_transaction(
                self.product.id, self.w1.id, None, Decimal("100"), "ISSUE"
            )
        self.assertIsInstance(ctx.exception, ConflictError)
        self.assertEqual(ctx.exception.available, Decimal("20"))
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("20"))
        self.assertEqual(self._ledger_size(), 2)

    def test_issue_without_inventory_is_insufficient(self):
        with self.assertRaises(InsufficientStockError):
            self.service.create_transaction(self.product.id, self.w1.id, None, Decimal("1"), "ISSUE")
        self.assertEqual(self._ledger_size(), 0)

    def test_transfer_moves_stock(self):
        self._receive("50")
        transfer = self.service.create_transaction(
            self.product.id, self.w1.id, self.w2.id, Decimal("20"), "TRANSFER"
        )
        self.assertEqual(transfer.direction_description, "W1 -> W2")
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("30"))
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w2.id), Decimal("20"))

    def test_transfer_within_one_warehouse_rejected(self):
        self._receive("10")
        with self.assertRaises(ValidationError):
            self.service.create_transaction(
                self.product.id, self.w1.id, self.w1.id, Decimal("5"), "TRANSFER"
            )
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("10"))
        self.assertEqual(self._ledger_size(), 1)

    def test_failed_inventory_update_rolls_back_everything(self):
        self._receive("50")
        with patch.object(self.inventory, "increase_stock", side_effect=RuntimeError("disk full")):
            with self.assertLogs("AUDIT", level="ERROR"):
                with self.assertRaises(RuntimeError):
                    self.service.create_transaction(
                        self.product.id, self.w1.id, self.w2.id, Decimal("20"), "TRANSFER"
                    )
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("50"))
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w2.id), Decimal("0"))
        self.assertEqual(self._ledger_size(), 1)

    def test_inactive_product_rejected(self):
        self.product.is_active = False
        self.db.commit()
        with self.assertRaises(ValidationError):
            self._receive("5")

    def test_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.service.create_transaction(999, None, self.w1.id, Decimal("1"), "RECEIPT")
        with self.assertRaises(NotFoundError):
            self.service.create_transaction(self.product.id, None, 999, Decimal("1"), "RECEIPT")
        with self.assertRaises(ValidationError):
            self.service.create_transaction(self.product.id, None, self.w1.id, Decimal("1"), "LOAN")

    def test_non_positive_quantity_rejected(self):
        with self.assertRaises(ValidationError):
            self._receive("0")
        self.assertEqual(self._ledger_size(), 0)

    def test_non_finite_quantity_rejected(self):
        for quantity in ("Infinity", "-Infinity", "NaN"):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValidationError):
                    self.service.create_transaction(
                        self.product.id, None, self.w1.id, quantity, "RECEIPT"
                    )
        self.assertEqual(self._ledger_size(), 0)
        self.assertEqual(self.inventory.get_quantity(self.product.id, self.w1.id), Decimal("0"))

    def test_audit_entry_on_success(self):
        with self.assertLogs("AUDIT", level="INFO") as logs:
            transaction = self.service.create_transaction(
                self.product.id,
                None,
                self.w1.id,
                Decimal("5"),
                "RECEIPT",
                user_id="alice",
                reference_number="PO-1",
            )
        created = [line for line in logs.output if "TRANSACTION_CREATED" in line]
        self.assertEqual(len(created), 1)
        self.assertIn("USER: alice", created[0])
        self.assertIn(f"ENTITY_ID: {transaction.id}", created[0])

    def test_queries(self):
        self._receive("50")
        self.service.create_transaction(
            self.product.id, self.w1.id, self.w2.id, Decimal("5"), "TRANSFER", reference_number="T-1"
        )
        now = datetime.now(timezone.utc)

        self.assertEqual(len(self.service.list_all()), 2)
        self.assertEqual(len(self.service.list_by_product(self.product.id)), 2)
        self.assertEqual(len(self.service.list_by_warehouse(self.w2.id)), 1)
        self.assertEqual(len(self.service.list_by_type("TRANSFER")), 1)
        self.assertEqual(len(self.service.list_by_reference_number("T-1")), 1)
        self.assertEqual(
            len(self.service.list_by_period(now - timedelta(hours=1), now + timedelta(hours=1))), 2
        )
        self.assertEqual(len(self.service.list_by_period(now + timedelta(hours=1), now + timedelta(hours=2))), 0)
        self.assertEqual(self.service.list_recent(1)[0].transaction_type, TransactionType.TRANSFER)
        with self.assertRaises(NotFoundError):
            self.service.get_transaction(999)
        with self.assertRaises(ValidationError):
            self.service.list_by_period(now, now - timedelta(days=1))

    def test_period_bounds_are_compared_in_utc(self):
        self._receive("5")
        riga_summer = timezone(timedelta(hours=3))
        local_now = datetime.now(riga_summer)
        window = timedelta(minutes=5)

        found = self.service.list_by_period(local_now - window, local_now + window)
        self.assertEqual(len(found), 1)

        naive_utc_start = datetime.now(timezone.utc).replace(tzinfo=None) - window
        found = self.service.list_by_period(naive_utc_start, local_now + window)
        self.assertEqual(len(found), 1)

        earlier = datetime.now(timezone(timedelta(hours=-5))) - timedelta(hours=2)
        self.assertEqual(self.service.list_by_period(earlier - window, earlier), [])


if __name__ == "__main__":
    unittest.main()

import unittest
from decimal import Decimal

from prometheus_client import CollectorRegistry
from sqlalchemy.orm import sessionmaker

from warehouse_api.core.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from warehouse_api.database.base import Base
from warehouse_api.database.engine import build_engine
from warehouse_api.models import InventoryItem, Product, StockStatus, Warehouse
from warehouse_api.services import AuditService, InventoryService, MetricsService


class InventoryServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.db = Session()

        self.product = Product(
            code="SKU1", name="Widget", description="Widget", category="Parts", price=Decimal("2.50")
        )
        self.other_product = Product(
            code="SKU2", name="Gadget", description="Gadget", category="Parts", price=Decimal("10.00")
        )
        self.warehouse = Warehouse(name="W1", location="Riga", capacity=100)
        self.db.add_all([self.product, self.other_product, self.warehouse])
        self.db.commit()

        self.registry = CollectorRegistry()
        self.service = InventoryService(self.db, AuditService(), MetricsService(self.registry))

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_set_quantity_creates_then_overwrites(self):
        item = self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("40"))
        self.assertEqual(item.quantity, Decimal("40"))

        again = self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("15"))
        self.assertEqual(again.id, item.id)
        self.assertEqual(self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("15"))
        self.assertEqual(len(self.service.list_all()), 1)

    def test_set_quantity_rejects_missing_references_and_negative(self):
        with self.assertRaises(NotFoundError):
            self.service.set_quantity(999, self.warehouse.id, Decimal("1"))
        with self.assertRaises(NotFoundError):
            self.service.set_quantity(self.product.id, 999, Decimal("1"))
        with self.assertRaises(InvalidArgumentError):
            self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("-1"))
        self.assertEqual(self.service.list_all(), [])

    def test_get_quantity_defaults_to_zero(self):
        self.assertEqual(self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("0"))

    def test_adjust_applies_delta(self):
        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("10"))
        item = self.service.adjust(self.product.id, self.warehouse.id, Decimal("-4"))
        self.assertEqual(item.quantity, Decimal("6"))

    def test_adjust_missing_item_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.adjust(self.product.id, self.warehouse.id, Decimal("5"))

    def test_adjust_never_goes_negative(self):
        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("3"))
        with self.assertRaises(InvalidStateError):
            self.service.adjust(self.product.id, self.warehouse.id, Decimal("-5"))
        self.assertEqual(self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("3"))

    def test_non_finite_quantities_rejected(self):
        for quantity in ("Infinity", Decimal("NaN")):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValidationError):
                    self.service.set_quantity(self.product.id, self.warehouse.id, quantity)
        self.assertEqual(self.service.list_all(), [])
        with self.assertRaises(ValidationError):
            self.service.check_low_stock("NaN")

    def test_quantities_limited_to_two_decimal_places(self):
        with self.assertRaises(InvalidArgumentError):
            self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("1.005"))
        self.assertEqual(self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("0"))

        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("3.25"))
        with self.assertRaises(InvalidArgumentError):
            self.service.adjust(self.product.id, self.warehouse.id, Decimal("0.001"))
        self.assertEqual(
            self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("3.25")
        )
        with self.assertRaises(InvalidArgumentError):
            self.service.create_inventory_item(
                self.other_product.id, self.warehouse.id, Decimal("1"), minimum_level="0.125"
            )

    def test_increase_stock_creates_missing_item(self):
        self.service.increase_stock(self.product.id, self.warehouse.id, Decimal("7"))
        self.service.increase_stock(self.product.id, self.warehouse.id, Decimal("3"))
        self.db.commit()
        self.assertEqual(self.service.get_quantity(self.product.id, self.warehouse.id), Decimal("10"))

    def test_decrease_stock_guards(self):
        with self.assertRaises(NotFoundError):
            self.service.decrease_stock(self.product.id, self.warehouse.id, Decimal("1"))
        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("2"))
        with self.assertRaises(InvalidStateError):
            self.service.decrease_stock(self.product.id, self.warehouse.id, Decimal("3"))

    def test_version_increments_on_every_write(self):
        item = self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("1"))
        first_version = item.version
        item = self.service.adjust(self.product.id, self.warehouse.id, Decimal("1"))
        self.assertEqual(item.version, first_version + 1)

    def test_check_low_stock_is_inclusive_and_alerts(self):
        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("5"))
        self.service.set_quantity(self.other_product.id, self.warehouse.id, Decimal("6"))

        with self.assertLogs("AUDIT", level="INFO") as logs:
            low = self.service.check_low_stock(Decimal("5"))

        self.assertEqual([item.product_id for item in low], [self.product.id])
        self.assertTrue(any("LOW_STOCK_DETECTED" in line for line in logs.output))
        self.assertEqual(
            self.registry.get_sample_value(
                "warehouse_low_stock_alerts_total", {"product_id": str(self.product.id)}
            ),
            1.0,
        )

    def test_levels_drive_stock_status(self):
        low = self.service.create_inventory_item(
            self.product.id, self.warehouse.id, Decimal("2"), minimum_level=Decimal("5")
        )
        high = self.service.create_inventory_item(
            self.other_product.id, self.warehouse.id, Decimal("20"), maximum_level=Decimal("10")
        )
        self.assertEqual(low.stock_status, StockStatus.LOW)
        self.assertEqual(high.stock_status, StockStatus.EXCESS)
        self.assertEqual([i.id for i in self.service.check_below_minimum_level()], [low.id])
        self.assertEqual([i.id for i in self.service.check_above_maximum_level()], [high.id])

        updated = self.service.update_levels(low.id, Decimal("1"), None)
        self.assertEqual(updated.stock_status, StockStatus.NORMAL)
        self.assertEqual(self.service.list_below_minimum_level(), [])

    def test_level_bounds_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            self.service.create_inventory_item(
                self.product.id,
                self.warehouse.id,
                Decimal("1"),
                minimum_level=Decimal("10"),
                maximum_level=Decimal("5"),
            )

    def test_set_quantity_keeps_levels(self):
        item = self.service.create_inventory_item(
            self.product.id, self.warehouse.id, Decimal("8"), minimum_level=Decimal("3")
        )
        item = self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("9"))
        self.assertEqual(item.minimum_level, Decimal("3"))

    def test_totals_and_queries(self):
        second = Warehouse(name="W2", location="Tallinn", capacity=50)
        self.db.add(second)
        self.db.commit()
        self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("4"))
        self.service.set_quantity(self.product.id, second.id, Decimal("6"))

        self.assertEqual(self.service.get_total_quantity_by_product(self.product.id), Decimal("10"))
        self.assertEqual(len(self.service.list_by_product(self.product.id)), 2)
        self.assertEqual(len(self.service.list_by_warehouse(second.id)), 1)
        self.assertEqual(len(self.service.list_below_threshold(Decimal("4"))), 1)

    def test_delete_inventory_item(self):
        item = self.service.set_quantity(self.product.id, self.warehouse.id, Decimal("4"))
        self.service.delete_inventory_item(item.id)
        with self.assertRaises(NotFoundError):
            self.service.get_item(item.id)
        self.assertIsNone(self.db.get(InventoryItem, item.id))


if __name__ == "__main__":
    unittest.main()

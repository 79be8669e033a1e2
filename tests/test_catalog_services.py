import unittest
from decimal import Decimal

from prometheus_client import CollectorRegistry
from sqlalchemy.orm import sessionmaker

from warehouse_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from warehouse_api.database.base import Base
from warehouse_api.database.engine import build_engine
from warehouse_api.schemas.product import ProductCreate, ProductUpdate
from warehouse_api.schemas.warehouse import WarehouseCreate, WarehouseUpdate
from warehouse_api.services import (
    AuditService,
    InventoryService,
    MetricsService,
    ProductService,
    WarehouseService,
)


def _product_payload(code="SKU-1", **overrides):
    values = dict(
        code=code,
        name="Widget",
        description="Steel widget",
        category="Parts",
        price=Decimal("4.20"),
    )
    values.update(overrides)
    return ProductCreate(**values)


class CatalogTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.db = Session()
        self.registry = CollectorRegistry()
        self.audit = AuditService()
        self.metrics = MetricsService(self.registry)
        self.products = ProductService(self.db, self.audit, self.metrics)
        self.warehouses = WarehouseService(self.db, self.audit)
        self.inventory = InventoryService(self.db, self.audit, self.metrics)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()


class ProductServiceTest(CatalogTestCase):
    def test_create_and_lookup(self):
        product = self.products.create_product(_product_payload())
        self.assertEqual(product.full_name, "[SKU-1] Widget")
        self.assertEqual(self.products.get_product_by_code("SKU-1").id, product.id)
        self.assertEqual(
            self.registry.get_sample_value(
                "warehouse_product_operations_total", {"operation": "create"}
            ),
            1.0,
        )

    def test_duplicate_code_conflicts(self):
        self.products.create_product(_product_payload())
        with self.assertRaises(ConflictError):
            self.products.create_product(_product_payload(name="Other"))

    def test_invalid_product_lists_errors(self):
        with self.assertRaises(ValidationError) as ctx:
            self.products.create_product(_product_payload(code="bad code", price=Decimal("-1")))
        self.assertEqual(len(ctx.exception.errors), 2)

    def test_partial_update_is_revalidated(self):
        product = self.products.create_product(_product_payload())
        updated = self.products.update_product(product.id, ProductUpdate(price=Decimal("5.00")))
        self.assertEqual(updated.price, Decimal("5.00"))
        self.assertEqual(updated.name, "Widget")

        with self.assertRaises(ValidationError):
            self.products.update_product(product.id, ProductUpdate(name=""))
        self.assertEqual(self.products.get_product(product.id).name, "Widget")

    def test_update_to_taken_code_conflicts(self):
        self.products.create_product(_product_payload("SKU-1"))
        second = self.products.create_product(_product_payload("SKU-2"))
        with self.assertRaises(ConflictError):
            self.products.update_product(second.id, ProductUpdate(code="SKU-1"))

    def test_delete_blocked_by_inventory(self):
        product = self.products.create_product(_product_payload())
        warehouse = self.warehouses.create_warehouse(
            WarehouseCreate(name="W1", location="Riga", capacity=10)
        )
        item = self.inventory.set_quantity(product.id, warehouse.id, Decimal("1"))
        with self.assertRaises(ConflictError):
            self.products.delete_product(product.id)

        self.inventory.delete_inventory_item(item.id)
        self.products.delete_product(product.id)
        with self.assertRaises(NotFoundError):
            self.products.get_product(product.id)

    def test_listing_and_search(self):
        self.products.create_product(_product_payload("SKU-1", category="Parts"))
        self.products.create_product(
            _product_payload("SKU-2", name="Hammer", category="Tools", is_active=False)
        )
        self.assertEqual(len(self.products.list_products()), 2)
        self.assertEqual([p.code for p in self.products.list_products(active=True)], ["SKU-1"])
        self.assertEqual([p.code for p in self.products.list_products(category="Tools")], ["SKU-2"])
        self.assertEqual(self.products.list_products(active=True, category="Tools"), [])
        self.assertEqual([p.code for p in self.products.search_products("hamm")], ["SKU-2"])
        self.assertEqual(self.products.list_categories(), ["Parts", "Tools"])


class WarehouseServiceTest(CatalogTestCase):
    def test_duplicate_name_conflicts(self):
        self.warehouses.create_warehouse(WarehouseCreate(name="W1", location="Riga", capacity=10))
        with self.assertRaises(ConflictError):
            self.warehouses.create_warehouse(
                WarehouseCreate(name="W1", location="Tallinn", capacity=10)
            )

    def test_invalid_capacity(self):
        with self.assertRaises(ValidationError):
            self.warehouses.create_warehouse(WarehouseCreate(name="W1", location="Riga", capacity=0))

    def test_update_and_search(self):
        warehouse = self.warehouses.create_warehouse(
            WarehouseCreate(name="North", location="Riga", capacity=10)
        )
        self.warehouses.create_warehouse(WarehouseCreate(name="South", location="Tallinn", capacity=10))

        updated = self.warehouses.update_warehouse(warehouse.id, WarehouseUpdate(location="Valmiera"))
        self.assertEqual(updated.full_name, "North (Valmiera)")
        self.assertIsNotNone(updated.updated_at)

        self.assertEqual([w.name for w in self.warehouses.search_warehouses("VALM")], ["North"])
        self.assertEqual([w.name for w in self.warehouses.search_warehouses("south")], ["South"])
        self.assertEqual(len(self.warehouses.search_warehouses("  ")), 2)

        with self.assertRaises(ConflictError):
            self.warehouses.update_warehouse(warehouse.id, WarehouseUpdate(name="South"))

    def test_delete_blocked_while_holding_inventory(self):
        warehouse = self.warehouses.create_warehouse(
            WarehouseCreate(name="W1", location="Riga", capacity=10)
        )
        product = self.products.create_product(_product_payload())
        self.inventory.set_quantity(product.id, warehouse.id, Decimal("0"))
        with self.assertRaises(ConflictError):
            self.warehouses.delete_warehouse(warehouse.id)

    def test_delete_empty_warehouse(self):
        warehouse = self.warehouses.create_warehouse(
            WarehouseCreate(name="W1", location="Riga", capacity=10)
        )
        self.warehouses.delete_warehouse(warehouse.id)
        with self.assertRaises(NotFoundError):
            self.warehouses.get_warehouse(warehouse.id)

    def test_inventory_summary(self):
        warehouse = self.warehouses.create_warehouse(
            WarehouseCreate(name="W1", location="Riga", capacity=4)
        )
        product = self.products.create_product(_product_payload())
        self.inventory.create_inventory_item(
            product.id, warehouse.id, Decimal("10"), minimum_level=Decimal("20")
        )

        summary = self.warehouses.get_inventory_summary(warehouse.id)
        self.assertEqual(summary["total_products"], 1)
        self.assertEqual(summary["total_value"], Decimal("42.00"))
        self.assertEqual(summary["low_stock_count"], 1)
        self.assertEqual(summary["utilization_percentage"], 25.0)


if __name__ == "__main__":
    unittest.main()

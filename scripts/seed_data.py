import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from warehouse_api.core.logging import setup_logging
from warehouse_api.database import SessionLocal, engine, init_db
from warehouse_api.models import InventoryItem, Product, Transaction, Warehouse
from warehouse_api.schemas.product import ProductCreate
from warehouse_api.schemas.warehouse import WarehouseCreate
from warehouse_api.services import (
    InventoryService,
    ProductService,
    TransactionService,
    WarehouseService,
)


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample warehouse data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    init_db(engine)

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(Transaction))
            db.execute(delete(InventoryItem))
            db.execute(delete(Product))
            db.execute(delete(Warehouse))
            db.commit()

        has_warehouse = db.execute(select(Warehouse.id).limit(1)).first()
        if has_warehouse:
            print("Seed skipped: warehouses already exist.")
            return

        warehouses = WarehouseService(db)
        riga = warehouses.create_warehouse(
            WarehouseCreate(name="Central", location="Riga", capacity=5000)
        )
        liepaja = warehouses.create_warehouse(
            WarehouseCreate(name="West", location="Liepaja", capacity=1500)
        )

        products = ProductService(db)
        bolts = products.create_product(
            ProductCreate(
                code="BOLT-M8",
                name="Bolt M8",
                description="Hex bolt M8x40, zinc plated",
                category="Fasteners",
                price=Decimal("0.35"),
                barcode="4750000000011",
            )
        )
        drill = products.create_product(
            ProductCreate(
                code="DRILL-18V",
                name="Cordless drill 18V",
                description="Cordless drill with two batteries",
                category="Tools",
                price=Decimal("129.90"),
                dimensions="30 x 25 x 10",
            )
        )

        inventory = InventoryService(db)
        inventory.create_inventory_item(
            bolts.id, riga.id, Decimal("0"), minimum_level=Decimal("500"), maximum_level=Decimal("5000")
        )
        inventory.create_inventory_item(
            drill.id, riga.id, Decimal("0"), minimum_level=Decimal("5"), maximum_level=Decimal("50")
        )

        transactions = TransactionService(db, inventory)
        transactions.create_transaction(
            bolts.id, None, riga.id, Decimal("2000"), "RECEIPT", reference_number="PO-1001"
        )
        transactions.create_transaction(
            drill.id, None, riga.id, Decimal("20"), "RECEIPT", reference_number="PO-1002"
        )
        transactions.create_transaction(
            bolts.id, riga.id, liepaja.id, Decimal("300"), "TRANSFER", description="Rebalance west"
        )
        transactions.create_transaction(
            drill.id, riga.id, None, Decimal("3"), "ISSUE", reference_number="SO-2001"
        )
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    main()

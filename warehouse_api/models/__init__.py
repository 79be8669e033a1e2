import importlib

from warehouse_api.models.inventory_item import InventoryItem, StockStatus
from warehouse_api.models.product import Product
from warehouse_api.models.transaction import Transaction, TransactionType
from warehouse_api.models.warehouse import Warehouse


def import_all_models() -> None:
    for module_name in (
        "warehouse_api.models.inventory_item",
        "warehouse_api.models.product",
        "warehouse_api.models.transaction",
        "warehouse_api.models.warehouse",
    ):
        importlib.import_module(module_name)


__all__ = [
    "InventoryItem",
    "Product",
    "StockStatus",
    "Transaction",
    "TransactionType",
    "Warehouse",
    "import_all_models",
]

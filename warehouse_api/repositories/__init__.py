from warehouse_api.repositories.inventory_repository import InventoryItemRepository
from warehouse_api.repositories.product_repository import ProductRepository
from warehouse_api.repositories.transaction_repository import TransactionRepository
from warehouse_api.repositories.warehouse_repository import WarehouseRepository

__all__ = [
    "InventoryItemRepository",
    "ProductRepository",
    "TransactionRepository",
    "WarehouseRepository",
]

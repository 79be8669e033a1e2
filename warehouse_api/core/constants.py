import re
from decimal import Decimal


TRANSACTION_TYPES = ("RECEIPT", "ISSUE", "TRANSFER")
STOCK_STATUSES = ("LOW", "NORMAL", "EXCESS")

PRODUCT_CODE_PATTERN = re.compile(r"^[A-Z0-9-_]{1,50}$")
BARCODE_PATTERN = re.compile(r"^[0-9]{8,13}$")
DIMENSIONS_PATTERN = re.compile(r"^\d+(\.\d+)?\s*x\s*\d+(\.\d+)?\s*x\s*\d+(\.\d+)?$")

MAX_DECIMAL_PLACES = 2
MAX_WAREHOUSE_CAPACITY = 1_000_000

ZERO = Decimal("0")

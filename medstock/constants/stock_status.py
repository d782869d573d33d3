# medstock/constants/stock_status.py

from enum import Enum


class StockStatus(str, Enum):
    OUT_OF_STOCK = "OutOfStock"
    LOW_STOCK = "LowStock"
    EXPIRED = "Expired"
    EXPIRING = "Expiring"
    IN_STOCK = "InStock"

# medstock/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_FAULT = "STORAGE_FAULT"

    # Products
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PRODUCT_HAS_MOVEMENTS = "PRODUCT_HAS_MOVEMENTS"

    # Movements
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

from datetime import date
from typing import List

from medstock.schemas.base import CamelModel
from medstock.schemas.movement_schemas import MovementOut
from medstock.schemas.product_schemas import ProductOut


class ExpiryAlert(CamelModel):
    product_id: int
    name: str
    expiration_date: date
    days_until: int


class DashboardOut(CamelModel):
    today: date
    total_products: int
    low_stock_count: int
    expiring_soon_count: int
    expired_count: int

    low_stock: List[ProductOut]
    expiring_soon: List[ExpiryAlert]
    expired: List[ExpiryAlert]
    recent_movements: List[MovementOut]

# medstock/services/stock_status.py
"""
Stock and expiry labels derived from a product snapshot.

Nothing here touches the database and nothing computed here is stored:
statuses are recomputed on every read from the product's current fields
and the caller's notion of "today".

Two views exist and they intentionally disagree on overlap:

* ``evaluate_status`` picks exactly one label per product by precedence
  (OutOfStock, LowStock, Expired, Expiring, InStock), so an empty expired
  product is reported as OutOfStock.
* ``dashboard_alerts`` fills three independent buckets, so the same
  product may be both low on stock and expired.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional

from medstock.constants.stock_status import StockStatus
from medstock.core.config import EXPIRING_WINDOW_DAYS, LOW_STOCK_THRESHOLD


def _as_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until(expiration: date, today: date) -> int:
    return (_as_date(expiration) - today).days


def is_expired(product, today: date) -> bool:
    expiration = _as_date(product.expiration_date)
    return expiration is not None and expiration <= today


def is_expiring_soon(product, today: date, window_days: int = EXPIRING_WINDOW_DAYS) -> bool:
    expiration = _as_date(product.expiration_date)
    if expiration is None:
        return False
    return 0 <= days_until(expiration, today) <= window_days


def is_low_stock(product, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
    return product.quantity < threshold


def evaluate_status(
    product,
    today: Optional[date] = None,
    *,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    expiring_window_days: int = EXPIRING_WINDOW_DAYS,
) -> StockStatus:
    today = today or date.today()

    if product.quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if is_low_stock(product, low_stock_threshold):
        return StockStatus.LOW_STOCK
    if is_expired(product, today):
        return StockStatus.EXPIRED
    if is_expiring_soon(product, today, expiring_window_days):
        return StockStatus.EXPIRING
    return StockStatus.IN_STOCK


@dataclass
class StockAlerts:
    low_stock: List = field(default_factory=list)
    expired: List = field(default_factory=list)
    expiring_soon: List = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.low_stock or self.expired or self.expiring_soon)


def dashboard_alerts(
    products: Iterable,
    today: Optional[date] = None,
    *,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    expiring_window_days: int = EXPIRING_WINDOW_DAYS,
) -> StockAlerts:
    today = today or date.today()
    alerts = StockAlerts()

    for product in products:
        if is_low_stock(product, low_stock_threshold):
            alerts.low_stock.append(product)
        if is_expired(product, today):
            alerts.expired.append(product)
        if is_expiring_soon(product, today, expiring_window_days):
            alerts.expiring_soon.append(product)

    return alerts

import logging
from datetime import date
from typing import Optional

from medstock.schemas.dashboard_schemas import DashboardOut, ExpiryAlert
from medstock.services.ledger_store import LedgerStore
from medstock.services.movement_service import list_movements
from medstock.services.product_service import map_product
from medstock.services.stock_status import StockAlerts, dashboard_alerts, days_until

logger = logging.getLogger(__name__)

RECENT_MOVEMENTS_LIMIT = 7


def _expiry_alert(product, today: date) -> ExpiryAlert:
    return ExpiryAlert(
        product_id=product.id,
        name=product.name,
        expiration_date=product.expiration_date,
        days_until=days_until(product.expiration_date, today),
    )


async def build_dashboard(store: LedgerStore, today: Optional[date] = None) -> DashboardOut:
    today = today or date.today()

    products = await store.list_products()
    alerts = dashboard_alerts(products, today)
    recent = await list_movements(store, limit=RECENT_MOVEMENTS_LIMIT)

    return DashboardOut(
        today=today,
        total_products=len(products),
        low_stock_count=len(alerts.low_stock),
        expiring_soon_count=len(alerts.expiring_soon),
        expired_count=len(alerts.expired),
        low_stock=[map_product(p, today) for p in alerts.low_stock],
        expiring_soon=[_expiry_alert(p, today) for p in alerts.expiring_soon],
        expired=[_expiry_alert(p, today) for p in alerts.expired],
        recent_movements=recent,
    )


# =====================================================
# SCHEDULED SWEEP
# =====================================================
async def sweep_stock_alerts(store: LedgerStore, today: Optional[date] = None) -> StockAlerts:
    today = today or date.today()
    products = await store.list_products()
    alerts = dashboard_alerts(products, today)

    if alerts.is_empty:
        logger.info("Stock alert sweep for %s: nothing to report", today)
        return alerts

    logger.warning(
        "Stock alert sweep for %s: %d low stock, %d expiring soon, %d expired",
        today,
        len(alerts.low_stock),
        len(alerts.expiring_soon),
        len(alerts.expired),
    )
    for label, bucket in (
        ("low stock", alerts.low_stock),
        ("expiring soon", alerts.expiring_soon),
        ("expired", alerts.expired),
    ):
        if bucket:
            logger.warning("  %s: %s", label, ", ".join(p.name for p in bucket))

    return alerts

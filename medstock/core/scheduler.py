from apscheduler.schedulers.asyncio import AsyncIOScheduler

from medstock.services.dashboard_service import sweep_stock_alerts
from medstock.services.ledger_store import LedgerStore


def build_scheduler(store: LedgerStore) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()

    # daily @ 06:00
    scheduler.add_job(
        sweep_stock_alerts,
        "cron",
        hour=6,
        minute=0,
        args=[store],
        id="stock_alert_sweep",
        replace_existing=True,
    )

    return scheduler

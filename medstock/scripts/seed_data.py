# medstock/scripts/seed_data.py

import asyncio
import logging
from datetime import date, timedelta
from typing import List, Optional

from medstock.core.config import DATABASE_URL
from medstock.core.logging import setup_logging
from medstock.services.ledger_store import LedgerStore
from medstock.schemas.validation import validate_product_create

logger = logging.getLogger(__name__)


def demo_products(today: Optional[date] = None) -> List[dict]:
    """Demo catalogue covering each dashboard bucket relative to ``today``."""
    today = today or date.today()
    return [
        {
            "name": "Paracetamol 500mg",
            "category": "Medications",
            "quantity": 50,
            "unit": "box",
            "batch": "BATCH001",
            "expirationDate": (today + timedelta(days=365)).isoformat(),
            "supplier": "PharmaCorp",
        },
        {
            "name": "Surgical Gloves M",
            "category": "PPE",
            "quantity": 5,
            "unit": "box",
            "batch": "GLV2024",
            "expirationDate": (today + timedelta(days=540)).isoformat(),
            "supplier": "MedEquip",
        },
        {
            "name": "Disposable Scalpel #15",
            "category": "Surgical Materials",
            "quantity": 100,
            "unit": "unit",
            "batch": "SCP2023",
            "expirationDate": (today - timedelta(days=30)).isoformat(),
            "supplier": "SurgicalTools Inc",
        },
        {
            "name": "Sterile Gauze",
            "category": "Dressing Materials",
            "quantity": 20,
            "unit": "pkg",
            "batch": "GAZ009",
            "expirationDate": (today + timedelta(days=14)).isoformat(),
            "supplier": "CleanMed",
        },
    ]


async def seed_demo_products(store: LedgerStore, today: Optional[date] = None) -> int:
    existing = await store.list_products()
    if existing:
        logger.info("Products table not empty, skipping demo seed")
        return 0

    created = 0
    for raw in demo_products(today):
        result = validate_product_create(raw)
        if not result.ok:
            raise ValueError(f"Invalid demo product {raw['name']!r}: {result.message}")
        await store.create_product(result.value.model_dump())
        created += 1

    logger.info("Seeded %d demo products", created)
    return created


async def main():
    store = LedgerStore.from_url(DATABASE_URL)
    try:
        await store.create_all()
        await seed_demo_products(store)
    finally:
        await store.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())

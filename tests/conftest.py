"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from datetime import date

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DB_TYPE", "sqlite")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["ENABLE_SCHEDULER"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from main import create_app  # noqa: E402
from medstock.services.ledger_store import LedgerStore  # noqa: E402


@pytest.fixture
def db_url(tmp_path) -> str:
    """File-backed so concurrent transactions get their own connections."""
    return f"sqlite+aiosqlite:///{tmp_path / 'medstock_test.db'}"


@pytest_asyncio.fixture
async def store(db_url) -> AsyncGenerator[LedgerStore, None]:
    ledger = LedgerStore.from_url(db_url)
    await ledger.create_all()
    yield ledger
    await ledger.dispose()


@pytest_asyncio.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(store=store, create_tables=False, seed=False, enable_scheduler=False)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def product_data() -> dict:
    """Sample product row for the store layer (snake_case)."""
    return {
        "name": "Gauze",
        "category": "Dressing Materials",
        "quantity": 20,
        "unit": "pkg",
        "batch": "GAZ009",
        "expiration_date": None,
        "supplier": "CleanMed",
    }


@pytest.fixture
def product_payload() -> dict:
    """Sample create-product request body (camelCase, as the UI sends it)."""
    return {
        "name": "Paracetamol 500mg",
        "category": "Medications",
        "quantity": 50,
        "unit": "box",
        "batch": "BATCH001",
        "expirationDate": "2027-12-31",
        "supplier": "PharmaCorp",
    }


@pytest_asyncio.fixture
async def make_product(store, product_data):
    async def _make(**overrides):
        return await store.create_product({**product_data, **overrides})

    return _make

# medstock/services/ledger_store.py
"""
Durable storage for products and their stock movements.

A ``LedgerStore`` is built once at start-up and handed to the services that
need it; nothing in the package reaches for a module-level engine. Reads
use short-lived sessions. Writes go through ``transaction()``, which
commits when the block finishes and rolls back on any exception, so a
failed unit of work leaves both tables untouched.

The module-level helpers take an open session and are what atomic units
(``run_atomic``) compose; the ``LedgerStore`` methods wrap the same
helpers in their own session for one-shot calls.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Tuple, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import medstock.models  # noqa: F401  (registers tables on Base.metadata)
from medstock.core.db import Base, build_engine, build_session_factory
from medstock.models.movement_models import Movement
from medstock.models.product_models import Product

logger = logging.getLogger(__name__)

T = TypeVar("T")

MovementRow = Tuple[Movement, Optional[str]]


# =====================================================
# SESSION-LEVEL HELPERS
# =====================================================
async def lock_product(session: AsyncSession, product_id: int) -> Optional[Product]:
    """Load a product and hold its row lock until the transaction ends.

    SQLite has no row locks; there the database-wide write lock taken by
    the first write of the transaction serialises writers instead.
    """
    result = await session.execute(
        select(Product).where(Product.id == product_id).with_for_update()
    )
    return result.scalar_one_or_none()


async def count_movements(session: AsyncSession, product_id: int) -> int:
    total = await session.scalar(
        select(func.count(Movement.id)).where(Movement.product_id == product_id)
    )
    return total or 0


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _movements_stmt(search: Optional[str] = None):
    stmt = (
        select(Movement, Product.name)
        .outerjoin(Product, Movement.product_id == Product.id)
        .order_by(Movement.date.desc(), Movement.id.desc())
    )
    if search:
        stmt = stmt.where(Product.name.ilike(_like_pattern(search), escape="\\"))
    return stmt


# =====================================================
# STORE
# =====================================================
class LedgerStore:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = build_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "LedgerStore":
        return cls(build_engine(database_url))

    # ---------------- lifecycle ----------------
    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    # ---------------- sessions ----------------
    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except BaseException:
            # Also covers task cancellation and early exits through exceptions
            await session.rollback()
            raise
        finally:
            await session.close()

    async def run_atomic(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self.transaction() as session:
            return await work(session)

    # ---------------- products ----------------
    async def get_product(self, product_id: int) -> Optional[Product]:
        async with self.session() as session:
            return await session.get(Product, product_id)

    async def create_product(self, data: dict) -> Product:
        async with self.transaction() as session:
            product = Product(**data)
            session.add(product)
            await session.flush()
            await session.refresh(product)
            return product

    async def update_product(self, product_id: int, changes: dict) -> Optional[Product]:
        async with self.transaction() as session:
            product = await lock_product(session, product_id)
            if product is None:
                return None
            for field, value in changes.items():
                setattr(product, field, value)
            await session.flush()
            await session.refresh(product)
            return product

    async def delete_product(self, product_id: int) -> bool:
        async with self.transaction() as session:
            result = await session.execute(
                delete(Product).where(Product.id == product_id)
            )
            return result.rowcount > 0

    async def list_products(self) -> List[Product]:
        async with self.session() as session:
            result = await session.execute(
                select(Product).order_by(Product.created_at.desc(), Product.id.desc())
            )
            return list(result.scalars().all())

    # ---------------- movements ----------------
    async def list_movements(
        self,
        *,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[MovementRow]:
        """Movements newest first, each paired with its product's current name."""
        stmt = _movements_stmt(search)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self.session() as session:
            result = await session.execute(stmt)
            return [(m, name) for m, name in result.all()]

    async def list_movements_for_product(self, product_id: int) -> List[MovementRow]:
        stmt = _movements_stmt().where(Movement.product_id == product_id)
        async with self.session() as session:
            result = await session.execute(stmt)
            return [(m, name) for m, name in result.all()]

    async def count_movements_for_product(self, product_id: int) -> int:
        async with self.session() as session:
            return await count_movements(session, product_id)

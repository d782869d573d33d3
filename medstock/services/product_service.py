# medstock/services/product_service.py

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from medstock.constants.error_codes import ErrorCode
from medstock.core.exceptions import AppException, NotFoundError
from medstock.models.product_models import Product
from medstock.schemas.product_schemas import ProductCreate, ProductOut, ProductUpdate
from medstock.services.ledger_store import LedgerStore, count_movements, lock_product
from medstock.services.stock_status import evaluate_status

logger = logging.getLogger(__name__)


def _not_found() -> NotFoundError:
    return NotFoundError("Product not found", ErrorCode.PRODUCT_NOT_FOUND)


def map_product(product: Product, today: Optional[date] = None) -> ProductOut:
    return ProductOut(
        id=product.id,
        name=product.name,
        category=product.category,
        quantity=product.quantity,
        unit=product.unit,
        batch=product.batch,
        expiration_date=product.expiration_date,
        supplier=product.supplier,
        status=evaluate_status(product, today),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


# ---------------- CREATE ----------------
async def create_product(store: LedgerStore, payload: ProductCreate) -> ProductOut:
    product = await store.create_product(payload.model_dump())
    logger.info("Created product %s (%s)", product.id, product.name)
    return map_product(product)


# ---------------- LIST ----------------
async def list_products(store: LedgerStore, today: Optional[date] = None) -> List[ProductOut]:
    products = await store.list_products()
    today = today or date.today()
    return [map_product(p, today) for p in products]


# ---------------- GET ----------------
async def get_product(store: LedgerStore, product_id: int) -> ProductOut:
    product = await store.get_product(product_id)
    if product is None:
        raise _not_found()
    return map_product(product)


# ---------------- UPDATE ----------------
async def update_product(
    store: LedgerStore,
    product_id: int,
    payload: ProductUpdate,
) -> ProductOut:
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise AppException(
            400,
            "No changes detected",
            ErrorCode.VALIDATION_ERROR,
        )

    product = await store.update_product(product_id, updates)
    if product is None:
        raise _not_found()

    logger.info("Updated product %s: %s", product_id, ", ".join(sorted(updates)))
    return map_product(product)


# ---------------- DELETE ----------------
async def delete_product(store: LedgerStore, product_id: int) -> None:
    """Delete a product that has no recorded movements.

    Products with history are kept so the movement log never points at a
    missing row; the foreign key is ``ON DELETE RESTRICT`` as a backstop.
    """

    async def _work(session: AsyncSession) -> None:
        product = await lock_product(session, product_id)
        if product is None:
            raise _not_found()

        movements = await count_movements(session, product_id)
        if movements:
            raise AppException(
                409,
                "Product has recorded stock movements and cannot be deleted",
                ErrorCode.PRODUCT_HAS_MOVEMENTS,
                {"movements": movements},
            )

        await session.execute(delete(Product).where(Product.id == product_id))

    await store.run_atomic(_work)
    logger.info("Deleted product %s", product_id)

import logging
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medstock.constants.error_codes import ErrorCode
from medstock.constants.movement_type import MovementType
from medstock.core.config import ALLOW_NEGATIVE_STOCK
from medstock.core.exceptions import AppException, NotFoundError, StorageFaultError
from medstock.models.movement_models import Movement
from medstock.models.product_models import Product
from medstock.schemas.movement_schemas import MovementCreate, MovementOut
from medstock.services.ledger_store import LedgerStore, MovementRow, lock_product

logger = logging.getLogger(__name__)


def signed_delta(movement_type: MovementType, quantity: int) -> int:
    return quantity if movement_type == MovementType.IN else -quantity


def _map_movement(movement: Movement, product_name: Optional[str] = None) -> MovementOut:
    return MovementOut(
        id=movement.id,
        product_id=movement.product_id,
        type=movement.type,
        quantity=movement.quantity,
        date=movement.date,
        product_name=product_name,
    )


async def _apply_quantity_change(session: AsyncSession, product_id: int, delta: int) -> int:
    # Computed by the database against the committed row, never from a value read earlier
    result = await session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(quantity=Product.quantity + delta)
        .returning(Product.quantity)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one()


# ---------------- RECORD ----------------
async def record_movement(
    store: LedgerStore,
    payload: MovementCreate,
    *,
    allow_negative: bool = ALLOW_NEGATIVE_STOCK,
) -> MovementOut:
    movement_type = MovementType(payload.type)
    delta = signed_delta(movement_type, payload.quantity)

    async def _work(session: AsyncSession) -> Tuple[Movement, str, int]:
        # ------------------------------------
        # 1. Lock product row
        # ------------------------------------
        product = await lock_product(session, payload.product_id)
        if product is None:
            raise NotFoundError("Product not found", ErrorCode.PRODUCT_NOT_FOUND)

        # ------------------------------------
        # 2. Insert movement (ledger)
        # ------------------------------------
        movement = Movement(
            product_id=product.id,
            type=movement_type.value,
            quantity=payload.quantity,
        )
        session.add(movement)
        await session.flush()

        # ------------------------------------
        # 3. Update running quantity
        # ------------------------------------
        new_quantity = await _apply_quantity_change(session, product.id, delta)

        # ------------------------------------
        # 4. Optional overdraw guard
        # ------------------------------------
        if new_quantity < 0 and not allow_negative:
            raise AppException(
                409,
                "Insufficient stock",
                ErrorCode.INSUFFICIENT_STOCK,
                {"available": new_quantity - delta, "requested": payload.quantity},
            )

        return movement, product.name, new_quantity

    try:
        movement, product_name, new_quantity = await store.run_atomic(_work)
    except AppException:
        raise
    except SQLAlchemyError as exc:
        logger.exception(
            "Stock movement failed",
            extra={"product_id": payload.product_id, "type": movement_type.value},
        )
        raise StorageFaultError("Failed to record stock movement") from exc

    logger.info(
        "Recorded %s %s for product %s, quantity now %s",
        movement_type.value,
        payload.quantity,
        movement.product_id,
        new_quantity,
    )
    return _map_movement(movement, product_name)


# ---------------- LIST ----------------
def _map_rows(rows: List[MovementRow]) -> List[MovementOut]:
    return [_map_movement(m, name) for m, name in rows]


async def list_movements(
    store: LedgerStore,
    search: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[MovementOut]:
    rows = await store.list_movements(search=search, limit=limit)
    return _map_rows(rows)


async def list_movements_for_product(store: LedgerStore, product_id: int) -> List[MovementOut]:
    rows = await store.list_movements_for_product(product_id)
    return _map_rows(rows)

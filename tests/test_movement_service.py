"""Movement engine: quantity bookkeeping, atomicity and concurrency."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from medstock.constants.error_codes import ErrorCode
from medstock.core.exceptions import AppException, NotFoundError, StorageFaultError
from medstock.schemas.movement_schemas import MovementCreate
from medstock.services import movement_service
from medstock.services.movement_service import (
    list_movements,
    list_movements_for_product,
    record_movement,
    signed_delta,
)


def _movement(product_id, type_, quantity):
    return MovementCreate(product_id=product_id, type=type_, quantity=quantity)


async def _quantity(store, product_id):
    return (await store.get_product(product_id)).quantity


class TestRecordMovement:
    async def test_in_increases_quantity(self, store, make_product):
        product = await make_product(quantity=20)

        movement = await record_movement(store, _movement(product.id, "IN", 7))

        assert await _quantity(store, product.id) == 27
        assert movement.id is not None
        assert movement.product_id == product.id
        assert movement.type == "IN"
        assert movement.quantity == 7
        assert movement.date is not None
        assert movement.product_name == "Gauze"

        history = await list_movements_for_product(store, product.id)
        assert [m.id for m in history] == [movement.id]

    async def test_out_decreases_quantity(self, store, make_product):
        product = await make_product(quantity=20)

        await record_movement(store, _movement(product.id, "OUT", 8))

        assert await _quantity(store, product.id) == 12

    async def test_out_beyond_stock_goes_negative_by_default(self, store, make_product):
        # Overdraw is allowed unless ALLOW_NEGATIVE_STOCK is switched off
        product = await make_product(name="Gauze", quantity=20, unit="pkg")

        await record_movement(store, _movement(product.id, "OUT", 25))

        assert await _quantity(store, product.id) == -5

    async def test_overdraw_guard_rolls_back(self, store, make_product):
        product = await make_product(quantity=20)

        with pytest.raises(AppException) as exc_info:
            await record_movement(
                store, _movement(product.id, "OUT", 25), allow_negative=False
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == ErrorCode.INSUFFICIENT_STOCK
        assert exc_info.value.details == {"available": 20, "requested": 25}
        assert await _quantity(store, product.id) == 20
        assert await list_movements(store) == []

    async def test_guard_allows_exact_depletion(self, store, make_product):
        product = await make_product(quantity=20)

        await record_movement(store, _movement(product.id, "OUT", 20), allow_negative=False)

        assert await _quantity(store, product.id) == 0

    async def test_missing_product_changes_nothing(self, store, make_product):
        product = await make_product(quantity=20)

        with pytest.raises(NotFoundError) as exc_info:
            await record_movement(store, _movement(product.id + 100, "IN", 5))

        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == ErrorCode.PRODUCT_NOT_FOUND
        assert await list_movements(store) == []
        assert await _quantity(store, product.id) == 20

    async def test_storage_fault_rolls_back_movement(self, store, make_product, monkeypatch):
        product = await make_product(quantity=20)

        async def failing_update(session, product_id, delta):
            raise OperationalError("UPDATE products", {}, Exception("disk I/O error"))

        monkeypatch.setattr(movement_service, "_apply_quantity_change", failing_update)

        with pytest.raises(StorageFaultError) as exc_info:
            await record_movement(store, _movement(product.id, "IN", 5))

        assert exc_info.value.status_code == 500
        # the movement row was flushed before the fault and must be gone
        assert await list_movements(store) == []
        assert await _quantity(store, product.id) == 20

    async def test_each_call_adds_exactly_one_row(self, store, make_product):
        product = await make_product(quantity=0)

        for qty in (1, 2, 3):
            await record_movement(store, _movement(product.id, "IN", qty))

        history = await list_movements_for_product(store, product.id)
        assert len(history) == 3
        assert await _quantity(store, product.id) == 6


class TestConcurrency:
    async def test_concurrent_outs_are_serialised(self, store, make_product):
        product = await make_product(quantity=50)

        results = await asyncio.gather(
            record_movement(store, _movement(product.id, "OUT", 10)),
            record_movement(store, _movement(product.id, "OUT", 10)),
        )

        assert len(results) == 2
        assert await _quantity(store, product.id) == 30

    async def test_concurrent_mixed_movements(self, store, make_product):
        product = await make_product(quantity=50)
        payloads = [_movement(product.id, "IN", 5) for _ in range(4)] + [
            _movement(product.id, "OUT", 3) for _ in range(4)
        ]

        await asyncio.gather(*(record_movement(store, p) for p in payloads))

        assert await _quantity(store, product.id) == 50 + 20 - 12
        assert len(await list_movements_for_product(store, product.id)) == 8

    async def test_different_products_are_independent(self, store, make_product):
        a = await make_product(name="A", quantity=10)
        b = await make_product(name="B", quantity=10)

        await asyncio.gather(
            record_movement(store, _movement(a.id, "IN", 1)),
            record_movement(store, _movement(b.id, "OUT", 1)),
        )

        assert await _quantity(store, a.id) == 11
        assert await _quantity(store, b.id) == 9


class TestListing:
    async def test_newest_first(self, store, make_product):
        a = await make_product(name="Alcohol 70%")
        b = await make_product(name="Bandage")

        m1 = await record_movement(store, _movement(a.id, "IN", 1))
        m2 = await record_movement(store, _movement(b.id, "IN", 2))
        m3 = await record_movement(store, _movement(a.id, "OUT", 1))

        listed = await list_movements(store)
        assert [m.id for m in listed] == [m3.id, m2.id, m1.id]
        dates = [m.date for m in listed]
        assert dates == sorted(dates, reverse=True)

        for_a = await list_movements_for_product(store, a.id)
        assert [m.id for m in for_a] == [m3.id, m1.id]

    async def test_search_by_product_name(self, store, make_product):
        a = await make_product(name="Alcohol 70%")
        b = await make_product(name="Bandage")
        await record_movement(store, _movement(a.id, "IN", 1))
        await record_movement(store, _movement(b.id, "IN", 2))

        found = await list_movements(store, search="band")

        assert [m.product_name for m in found] == ["Bandage"]

    async def test_search_wildcards_are_literal(self, store, make_product):
        plain = await make_product(name="Saline 09")
        pct = await make_product(name="Iodine 10%")
        await record_movement(store, _movement(plain.id, "IN", 1))
        await record_movement(store, _movement(pct.id, "IN", 1))

        assert [m.product_name for m in await list_movements(store, search="%")] == ["Iodine 10%"]
        assert await list_movements(store, search="_") == []

    async def test_limit(self, store, make_product):
        product = await make_product()
        for _ in range(5):
            await record_movement(store, _movement(product.id, "IN", 1))

        assert len(await list_movements(store, limit=3)) == 3

    async def test_unknown_product_history_is_empty(self, store):
        assert await list_movements_for_product(store, 9999) == []


def test_signed_delta():
    assert signed_delta("IN", 4) == 4
    assert signed_delta("OUT", 4) == -4

"""
Tests for `gelp/domain/stock/ledger.py`.

Covers the stock ledger rules:
- Absence of a stock row reads as zero stock.
- set_quantity upserts and rejects negative quantities (InvalidQuantity, a ValidationError).
- adjust never clamps: a decrement beyond the available quantity is rejected.
- adjust_many is all-or-nothing and reports every short product.
- Concurrent adjustments of one product never take more than is on hand.
- Quantities stay within the 32-bit column range.
"""

from __future__ import annotations

import asyncio

import pytest

from gelp.core.errors import InsufficientStock, InvalidQuantity, NotFoundError, ValidationError
from gelp.domain.common import MAX_QUANTITY
from gelp.domain.stock.ledger import StockLedger, merge_deltas


async def test_missing_stock_row_reads_as_zero(database, make_product) -> None:
    pid = await make_product()

    async with database.session() as s:
        ledger = StockLedger(s)
        assert await ledger.get_quantity(pid) == 0
        level = await ledger.get_level(pid)

    assert level.quantity == 0
    assert level.last_updated is None


async def test_get_level_unknown_product(database) -> None:
    async with database.session() as s:
        with pytest.raises(NotFoundError):
            await StockLedger(s).get_level(999)


async def test_set_quantity_upserts(database, make_product, stock_of) -> None:
    pid = await make_product()

    async with database.session() as s:
        async with s.begin():
            await StockLedger(s).set_quantity(pid, 7)
    assert await stock_of(pid) == 7

    async with database.session() as s:
        async with s.begin():
            level = await StockLedger(s).set_quantity(pid, 3)
    assert await stock_of(pid) == 3
    assert level.last_updated is not None


async def test_set_negative_quantity_is_rejected(database, make_product, stock_of) -> None:
    """setQuantity(x, -1) fails with a ValidationError and leaves stock untouched."""

    pid = await make_product(quantity=4)

    async with database.session() as s:
        with pytest.raises(ValidationError) as excinfo:
            async with s.begin():
                await StockLedger(s).set_quantity(pid, -1)

    assert isinstance(excinfo.value, InvalidQuantity)
    assert await stock_of(pid) == 4


async def test_adjust_increments_and_creates_row(database, make_product, stock_of) -> None:
    pid = await make_product()

    async with database.session() as s:
        async with s.begin():
            assert await StockLedger(s).adjust(pid, 5) == 5
    async with database.session() as s:
        async with s.begin():
            assert await StockLedger(s).adjust(pid, 2) == 7

    assert await stock_of(pid) == 7


async def test_adjust_does_not_clamp(database, make_product, stock_of) -> None:
    pid = await make_product(quantity=3)

    async with database.session() as s:
        with pytest.raises(InsufficientStock) as excinfo:
            async with s.begin():
                await StockLedger(s).adjust(pid, -5)

    assert excinfo.value.product_ids == [pid]
    assert excinfo.value.shortages[pid] == {"requested": 5, "available": 3}
    assert await stock_of(pid) == 3


async def test_adjust_to_exactly_zero_is_allowed(database, make_product, stock_of) -> None:
    pid = await make_product(quantity=3)

    async with database.session() as s:
        async with s.begin():
            assert await StockLedger(s).adjust(pid, -3) == 0

    assert await stock_of(pid) == 0


async def test_adjust_many_is_all_or_nothing(database, make_product, stock_of) -> None:
    a = await make_product(name="A", quantity=10)
    b = await make_product(name="B", quantity=1)
    c = await make_product(name="C")

    async with database.session() as s:
        with pytest.raises(InsufficientStock) as excinfo:
            async with s.begin():
                await StockLedger(s).adjust_many([(a, -2), (b, -3), (c, -1)])

    assert excinfo.value.product_ids == sorted([b, c])
    assert await stock_of(a) == 10
    assert await stock_of(b) == 1
    assert await stock_of(c) == 0


async def test_adjust_many_sums_deltas_of_the_same_product(database, make_product, stock_of) -> None:
    pid = await make_product(quantity=5)

    async with database.session() as s:
        with pytest.raises(InsufficientStock):
            async with s.begin():
                # each line fits on its own, together they do not
                await StockLedger(s).adjust_many([(pid, -3), (pid, -3)])

    async with database.session() as s:
        async with s.begin():
            await StockLedger(s).adjust_many([(pid, -3), (pid, 1), (pid, -2)])

    assert await stock_of(pid) == 1


async def test_adjust_many_unknown_product(database, make_product) -> None:
    pid = await make_product(quantity=5)

    async with database.session() as s:
        with pytest.raises(NotFoundError) as excinfo:
            async with s.begin():
                await StockLedger(s).adjust_many([(pid, -1), (404, -1)])

    assert excinfo.value.ids == [404]


def test_merge_deltas_orders_by_product() -> None:
    merged = merge_deltas([(3, -1), (1, 2), (3, -4)])
    assert list(merged.items()) == [(1, 2), (3, -5)]


def test_merge_deltas_rejects_non_integers() -> None:
    with pytest.raises(InvalidQuantity):
        merge_deltas([(1, 1.5)])


async def test_concurrent_adjustments_never_oversell(database, make_product, stock_of) -> None:
    """Four takes of 3 against stock 5: one wins, the rest are short, 2 remain."""

    pid = await make_product(quantity=5)

    async def take(amount: int) -> str:
        async with database.session() as s:
            try:
                async with s.begin():
                    await StockLedger(s).adjust(pid, -amount)
            except InsufficientStock:
                return "short"
        return "ok"

    outcomes = await asyncio.gather(*(take(3) for _ in range(4)))

    assert sorted(outcomes) == ["ok", "short", "short", "short"]
    assert await stock_of(pid) == 2


async def test_quantities_above_column_range_are_rejected(database, make_product, stock_of) -> None:
    pid = await make_product(quantity=MAX_QUANTITY - 1)

    async with database.session() as s:
        with pytest.raises(InvalidQuantity):
            async with s.begin():
                await StockLedger(s).set_quantity(pid, MAX_QUANTITY + 1)

    async with database.session() as s:
        with pytest.raises(InvalidQuantity):
            async with s.begin():
                await StockLedger(s).adjust(pid, 2)

    assert await stock_of(pid) == MAX_QUANTITY - 1

    async with database.session() as s:
        async with s.begin():
            assert await StockLedger(s).adjust(pid, 1) == MAX_QUANTITY

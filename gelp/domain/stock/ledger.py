# gelp/domain/stock/ledger.py
"""Stock ledger: authoritative, never-negative on-hand quantity per product.

The ledger works inside the caller's session and transaction and never
commits. Callers that need the all-or-nothing guarantee of ``adjust_many``
must roll back their transaction when it raises; the sale coordinator does
this by running inside ``session.begin()``.

Concurrency: the availability check is re-validated by the database at write
time (``UPDATE ... WHERE quantity >= amount``), and rows are additionally
locked with ``SELECT ... FOR UPDATE`` on backends that support it, so two
transactions can never both take the last units of a product.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from gelp.core.errors import InsufficientStock, InvalidQuantity, NotFoundError
from gelp.core.time import as_utc, utc_now
from gelp.db.repositories.catalog import get_product_by_id, get_products_by_ids
from gelp.db.repositories.stock import (
    decrement_if_available,
    get_stock_row,
    increment_quantity,
    lock_stock_rows,
    upsert_quantity,
)
from gelp.domain.common import MAX_QUANTITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockSnapshot:
    product_id: int
    quantity: int
    last_updated: Optional[datetime]


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantity(f"{name} must be an integer, got {value!r}")
    return value


def merge_deltas(changes: Iterable[Tuple[int, int]]) -> "OrderedDict[int, int]":
    """Sum deltas per product, ordered by product id."""
    merged: Dict[int, int] = {}
    for product_id, delta in changes:
        _require_int("delta", delta)
        merged[product_id] = merged.get(product_id, 0) + delta
    return OrderedDict(sorted(merged.items()))


class StockLedger:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_product(self, product_id: int) -> None:
        if await get_product_by_id(self.db, product_id) is None:
            raise NotFoundError("product", [product_id])

    async def get_quantity(self, product_id: int) -> int:
        row = await get_stock_row(self.db, product_id)
        return row.quantity if row is not None else 0

    async def get_level(self, product_id: int) -> StockSnapshot:
        await self._require_product(product_id)
        row = await get_stock_row(self.db, product_id)
        if row is None:
            return StockSnapshot(product_id=product_id, quantity=0, last_updated=None)
        return StockSnapshot(product_id=product_id, quantity=row.quantity, last_updated=as_utc(row.last_updated))

    async def set_quantity(self, product_id: int, quantity: int, now: Optional[datetime] = None) -> StockSnapshot:
        _require_int("quantity", quantity)
        if quantity < 0:
            raise InvalidQuantity(f"Stock quantity cannot be negative (got {quantity})")
        if quantity > MAX_QUANTITY:
            raise InvalidQuantity(f"Stock quantity cannot exceed {MAX_QUANTITY} (got {quantity})")
        await self._require_product(product_id)

        now = now or utc_now()
        await upsert_quantity(self.db, product_id, quantity, now)
        logger.info("Stock of product %s set to %s", product_id, quantity)
        return StockSnapshot(product_id=product_id, quantity=quantity, last_updated=now)

    async def adjust(self, product_id: int, delta: int, now: Optional[datetime] = None) -> int:
        """Apply a relative change and return the new quantity."""
        await self.adjust_many([(product_id, delta)], now=now)
        return await self.get_quantity(product_id)

    async def adjust_many(self, changes: Iterable[Tuple[int, int]], now: Optional[datetime] = None) -> None:
        """Apply every delta or none of them.

        Raises ``InsufficientStock`` naming every product that can't cover its
        (summed) decrement, and ``InvalidQuantity`` when an increment would
        overflow the stored quantity. Nothing has been written when the
        pre-check fails; if a conditional write still loses a race, earlier
        writes of this call are in the open transaction and the caller must
        roll it back.
        """
        deltas = merge_deltas(changes)
        deltas = OrderedDict((pid, d) for pid, d in deltas.items() if d != 0)
        if not deltas:
            return

        products = await get_products_by_ids(self.db, deltas)
        missing = [pid for pid in deltas if pid not in products]
        if missing:
            raise NotFoundError("product", missing)

        rows = await lock_stock_rows(self.db, deltas)
        shortages = {}
        for product_id, delta in deltas.items():
            available = rows[product_id].quantity if product_id in rows else 0
            if available + delta > MAX_QUANTITY:
                raise InvalidQuantity(f"Stock of product {product_id} would exceed {MAX_QUANTITY}")
            if available + delta < 0:
                shortages[product_id] = {"requested": -delta, "available": available}
        if shortages:
            raise InsufficientStock(shortages)

        now = now or utc_now()
        for product_id, delta in deltas.items():
            if delta > 0:
                await increment_quantity(self.db, product_id, delta, now)
                continue
            if not await decrement_if_available(self.db, product_id, -delta, now):
                available = await self.get_quantity(product_id)
                shortages[product_id] = {"requested": -delta, "available": available}

        if shortages:
            raise InsufficientStock(shortages)

        logger.info("Stock adjusted: %s", dict(deltas))

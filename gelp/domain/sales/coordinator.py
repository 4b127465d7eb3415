# gelp/domain/sales/coordinator.py
"""Sale transaction coordinator.

Turns a sale request into one all-or-nothing change: the sale header, its
line items and the stock decrements are committed together or not at all.

Business-rule failures (validation, unknown ids, insufficient stock, lock
conflicts, timeouts) come back as a failed ``SaleResult``; only
infrastructure failures (``StorageUnavailable``) are raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gelp.core.errors import (
    EmptySaleError,
    GelpError,
    NotFoundError,
    SaleTimeoutError,
    StorageUnavailable,
    ValidationError,
)
from gelp.core.time import utc_now
from gelp.db.base import Database
from gelp.db.errors import translate_db_error
from gelp.db.models.sale_items import SaleItem
from gelp.db.models.sales import Sale
from gelp.db.repositories.catalog import get_products_by_ids
from gelp.db.repositories.partners import get_client_by_id
from gelp.db.repositories.sales import get_sale_by_idempotency_key
from gelp.domain.common import MAX_QUANTITY
from gelp.domain.stock.ledger import StockLedger
from .schemas import SaleCreate, SaleItemCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# largest value of a NUMERIC(18, 2) column
MAX_AMOUNT = Decimal("9999999999999999.99")


@dataclass(frozen=True)
class SaleResult:
    """Outcome of ``SaleCoordinator.register_sale``.

    Exactly one of ``sale_id`` / ``error`` is set. ``replayed`` is True when
    the idempotency key matched an already recorded sale.
    """

    sale_id: Optional[int] = None
    total: Optional[Decimal] = None
    replayed: bool = False
    error: Optional[GelpError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: GelpError) -> "SaleResult":
        return cls(error=error)


def compute_total(items: List[SaleItemCreate]) -> Decimal:
    total = sum((Decimal(item.quantity) * item.unit_price for item in items), Decimal("0"))
    if total > MAX_AMOUNT:
        raise ValidationError(f"Sale total cannot exceed {MAX_AMOUNT}")
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def validate_items(items: List[SaleItemCreate]) -> None:
    if not items:
        raise EmptySaleError()
    for item in items:
        if item.quantity <= 0:
            raise ValidationError(f"Quantity for product {item.product_id} must be greater than zero")
        if item.quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity for product {item.product_id} cannot exceed {MAX_QUANTITY}")
        if item.unit_price < 0:
            raise ValidationError(f"Unit price for product {item.product_id} cannot be negative")
        # quantize fails on values this large
        if item.unit_price > MAX_AMOUNT:
            raise ValidationError(f"Unit price for product {item.product_id} cannot exceed {MAX_AMOUNT}")
        if item.unit_price != item.unit_price.quantize(CENT):
            raise ValidationError(f"Unit price for product {item.product_id} has more than 2 decimal places")


class SaleCoordinator:
    """Registers sales against one ``Database``.

    The timeout covers the whole transaction including its commit. When it
    fires while the COMMIT is already in flight, the sale may be stored even
    though the caller is told it timed out. With an idempotency key the
    coordinator looks the sale up again and reports it; without one, a retry
    can record the sale twice.
    """

    def __init__(self, database: Database, timeout: float = 10.0):
        self.database = database
        self.timeout = timeout

    async def register_sale(self, request: SaleCreate) -> SaleResult:
        # checked before any storage resource is touched
        try:
            validate_items(request.items)
            total = compute_total(request.items)
        except ValidationError as exc:
            return SaleResult.failed(exc)

        try:
            return await asyncio.wait_for(self._register(request, total), timeout=self.timeout)
        except asyncio.TimeoutError:
            committed = await self._committed_after_timeout(request.idempotency_key)
            if committed is not None:
                return committed
            logger.warning("Sale rolled back: not completed within %ss", self.timeout)
            return SaleResult.failed(SaleTimeoutError(self.timeout))

    async def _committed_after_timeout(self, key: Optional[str]) -> Optional[SaleResult]:
        if key is None:
            return None
        try:
            async with self.database.session() as db:
                existing = await get_sale_by_idempotency_key(db, key)
        except SQLAlchemyError as exc:
            logger.warning("Could not check idempotency key %r after timeout: %s", key, exc)
            return None
        if existing is None:
            return None
        logger.warning("Sale %s timed out after its commit; reporting it as recorded", existing.id)
        return SaleResult(sale_id=existing.id, total=existing.total)

    async def _register(self, request: SaleCreate, total: Decimal) -> SaleResult:
        key = request.idempotency_key
        try:
            async with self.database.session() as db:
                async with db.begin():
                    if key is not None:
                        existing = await get_sale_by_idempotency_key(db, key)
                        if existing is not None:
                            logger.info("Sale %s replayed for idempotency key %r", existing.id, key)
                            return SaleResult(sale_id=existing.id, total=existing.total, replayed=True)

                    sale_id = await self._write_sale(db, request, total)
        except GelpError as exc:
            logger.warning("Sale rolled back: %s", exc.message)
            return SaleResult.failed(exc)
        except IntegrityError as exc:
            if key is not None:
                replay = await self._find_replay(key)
                if replay is not None:
                    return replay
            return self._storage_failure(exc)
        except SQLAlchemyError as exc:
            return self._storage_failure(exc)

        logger.info("Sale %s committed: %s item(s), total %s", sale_id, len(request.items), total)
        return SaleResult(sale_id=sale_id, total=total)

    async def _write_sale(self, db, request: SaleCreate, total: Decimal) -> int:
        now = utc_now()

        if request.client_id is not None and await get_client_by_id(db, request.client_id) is None:
            raise NotFoundError("client", [request.client_id])

        products = await get_products_by_ids(db, (item.product_id for item in request.items))
        missing = sorted({item.product_id for item in request.items if item.product_id not in products})
        if missing:
            raise NotFoundError("product", missing)
        inactive = sorted(pid for pid, p in products.items() if p.status != "active")
        if inactive:
            raise ValidationError(f"Inactive products cannot be sold: {', '.join(map(str, inactive))}")

        sale = Sale(
            sale_date=now,
            total=total,
            status="completed",
            client_id=request.client_id,
            idempotency_key=request.idempotency_key,
        )
        db.add(sale)
        await db.flush()

        decrements: List[Tuple[int, int]] = []
        for item in request.items:
            db.add(
                SaleItem(
                    sale_id=sale.id,
                    product_id=item.product_id,
                    product_name=products[item.product_id].name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
            )
            decrements.append((item.product_id, -item.quantity))
        await db.flush()

        await StockLedger(db).adjust_many(decrements, now=now)
        return sale.id

    async def _find_replay(self, key: str) -> Optional[SaleResult]:
        async with self.database.session() as db:
            existing = await get_sale_by_idempotency_key(db, key)
        if existing is None:
            return None
        logger.info("Sale %s replayed for idempotency key %r after a concurrent insert", existing.id, key)
        return SaleResult(sale_id=existing.id, total=existing.total, replayed=True)

    def _storage_failure(self, exc: SQLAlchemyError) -> SaleResult:
        error = translate_db_error(exc)
        if isinstance(error, StorageUnavailable):
            raise error from exc
        logger.warning("Sale rolled back: %s", error.message)
        return SaleResult.failed(error)

# gelp/domain/stock/service.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gelp.core.errors import NotFoundError
from gelp.core.time import as_utc, utc_now
from gelp.db.models.stock_entries import StockEntry
from gelp.db.repositories.partners import get_supplier_by_id
from gelp.db.repositories.stock import list_stock_entries, list_stock_with_products
from gelp.domain.stock.ledger import StockLedger
from .schemas import StockEntryCreate, StockListItem

logger = logging.getLogger(__name__)


async def list_stock(db: AsyncSession) -> List[StockListItem]:
    rows = await list_stock_with_products(db)
    return [
        StockListItem(
            id=row.id,
            product_id=row.product_id,
            product_name=row.product_name,
            quantity=row.quantity,
            last_updated=as_utc(row.last_updated),
        )
        for row in rows
    ]


async def record_stock_entry(
    db: AsyncSession,
    data: StockEntryCreate
) -> StockEntry:
    """Insert a goods receipt and add its quantity to stock, as one unit."""
    async with db.begin():
        if data.supplier_id is not None and await get_supplier_by_id(db, data.supplier_id) is None:
            raise NotFoundError("supplier", [data.supplier_id])

        now = utc_now()
        entry = StockEntry(
            product_id=data.product_id,
            supplier_id=data.supplier_id,
            quantity=data.quantity,
            unit_cost=data.unit_cost,
            entry_date=data.entry_date or now,
            expiry_date=data.expiry_date,
            lot_number=data.lot_number,
        )
        # the ledger validates the product before anything is flushed
        await StockLedger(db).adjust_many([(data.product_id, data.quantity)], now=now)
        db.add(entry)

    logger.info("Stock entry %s: +%s of product %s", entry.id, entry.quantity, entry.product_id)
    return entry


async def get_stock_entries(
    db: AsyncSession,
    product_id: Optional[int] = None
) -> List[StockEntry]:
    return await list_stock_entries(db, product_id)

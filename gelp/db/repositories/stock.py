"""Row-level primitives for the ``stock`` table.

These helpers never commit and never decide whether a change is allowed;
the stock ledger owns the non-negativity rule and calls them inside the
caller's transaction.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from gelp.db.models.products import Product
from gelp.db.models.stock import StockLevel
from gelp.db.models.stock_entries import StockEntry

_UPSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _insert_for(db: AsyncSession):
    # the backend was checked against SUPPORTED_DIALECTS when the Database was built
    return _UPSERT_BUILDERS[db.get_bind().dialect.name]


async def get_stock_row(
    db: AsyncSession,
    product_id: int
) -> Optional[StockLevel]:
    result = await db.execute(
        select(StockLevel)
        .where(StockLevel.product_id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def lock_stock_rows(
    db: AsyncSession,
    product_ids: Iterable[int]
) -> Dict[int, StockLevel]:
    """SELECT ... FOR UPDATE the stock rows of ``product_ids``.

    Rows are locked in product id order so that two transactions touching
    overlapping products always queue instead of deadlocking. Products
    without a stock row are simply absent from the result.
    """
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(StockLevel)
        .where(StockLevel.product_id.in_(ids))
        .order_by(StockLevel.product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {row.product_id: row for row in result.scalars().all()}


async def upsert_quantity(
    db: AsyncSession,
    product_id: int,
    quantity: int,
    now: datetime
) -> None:
    insert = _insert_for(db)
    stmt = insert(StockLevel).values(product_id=product_id, quantity=quantity, last_updated=now)
    stmt = stmt.on_conflict_do_update(
        index_elements=[StockLevel.product_id],
        set_={"quantity": stmt.excluded.quantity, "last_updated": stmt.excluded.last_updated},
    )
    await db.execute(stmt)


async def increment_quantity(
    db: AsyncSession,
    product_id: int,
    amount: int,
    now: datetime
) -> None:
    insert = _insert_for(db)
    stmt = insert(StockLevel).values(product_id=product_id, quantity=amount, last_updated=now)
    stmt = stmt.on_conflict_do_update(
        index_elements=[StockLevel.product_id],
        set_={
            "quantity": StockLevel.quantity + stmt.excluded.quantity,
            "last_updated": stmt.excluded.last_updated,
        },
    )
    await db.execute(stmt)


async def decrement_if_available(
    db: AsyncSession,
    product_id: int,
    amount: int,
    now: datetime
) -> bool:
    """Conditionally take ``amount`` units; False when the row can't cover it.

    The availability check and the write are one statement, so it is
    evaluated against the current committed value even without a prior lock.
    """
    result = await db.execute(
        update(StockLevel)
        .where(StockLevel.product_id == product_id, StockLevel.quantity >= amount)
        .values(quantity=StockLevel.quantity - amount, last_updated=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def list_stock_with_products(db: AsyncSession) -> Sequence:
    result = await db.execute(
        select(
            StockLevel.id,
            StockLevel.product_id,
            Product.name.label("product_name"),
            StockLevel.quantity,
            StockLevel.last_updated,
        )
        .join(Product, StockLevel.product_id == Product.id)
        .order_by(Product.name, StockLevel.product_id)
    )
    return result.all()


async def list_stock_entries(
    db: AsyncSession,
    product_id: Optional[int] = None
) -> List[StockEntry]:
    stmt = select(StockEntry).order_by(StockEntry.entry_date.desc(), StockEntry.id.desc())
    if product_id is not None:
        stmt = stmt.where(StockEntry.product_id == product_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())

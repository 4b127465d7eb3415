from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from gelp.db.models.clients import Client
from gelp.db.models.products import Product
from gelp.db.models.sale_items import SaleItem
from gelp.db.models.sales import Sale


async def get_sale_by_idempotency_key(
    db: AsyncSession,
    key: str
) -> Optional[Sale]:
    result = await db.execute(
        select(Sale).where(Sale.idempotency_key == key)
    )
    return result.scalar_one_or_none()


async def get_sale_header(
    db: AsyncSession,
    sale_id: int
):
    """Sale row plus the client name (None for walk-in sales)."""
    result = await db.execute(
        select(Sale, Client.name.label("client_name"))
        .outerjoin(Client, Sale.client_id == Client.id)
        .where(Sale.id == sale_id)
    )
    return result.one_or_none()


async def get_line_items_for_sale(
    db: AsyncSession,
    sale_id: int
) -> Sequence:
    # live product name when the product still exists, snapshot otherwise
    result = await db.execute(
        select(
            SaleItem.id,
            SaleItem.product_id,
            func.coalesce(Product.name, SaleItem.product_name).label("product_name"),
            SaleItem.quantity,
            SaleItem.unit_price,
        )
        .outerjoin(Product, SaleItem.product_id == Product.id)
        .where(SaleItem.sale_id == sale_id)
        .order_by(SaleItem.id)
    )
    return result.all()


async def list_sales_with_client(
    db: AsyncSession,
    client_id: Optional[int] = None
) -> Sequence:
    stmt = (
        select(Sale, Client.name.label("client_name"))
        .outerjoin(Client, Sale.client_id == Client.id)
        .order_by(Sale.sale_date.desc(), Sale.id.desc())
    )
    if client_id is not None:
        stmt = stmt.where(Sale.client_id == client_id)
    result = await db.execute(stmt)
    return result.all()


async def count_sales_between(
    db: AsyncSession,
    start: datetime,
    end: datetime
) -> int:
    result = await db.execute(
        select(func.count()).select_from(Sale).where(Sale.sale_date >= start, Sale.sale_date < end)
    )
    return int(result.scalar_one())


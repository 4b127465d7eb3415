# gelp/domain/reports/service.py
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from gelp.core.time import day_bounds_utc
from gelp.db.models.clients import Client
from gelp.db.models.products import Product
from gelp.db.models.stock import StockLevel
from gelp.db.repositories.sales import count_sales_between
from .schemas import DashboardCounts


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return int(result.scalar_one())


async def get_dashboard_counts(
    db: AsyncSession,
    tz_name: str = "UTC",
    now: Optional[datetime] = None
) -> DashboardCounts:
    """Counts recomputed from committed state on every call.

    "Today" is the calendar day of ``now`` in ``tz_name``; its bounds are
    converted to UTC before comparing with the stored sale dates.
    """
    start, end = day_bounds_utc(tz_name, now)
    return DashboardCounts(
        total_products=await _count(db, select(func.count()).select_from(Product)),
        products_in_stock=await _count(
            db, select(func.count()).select_from(StockLevel).where(StockLevel.quantity > 0)
        ),
        total_clients=await _count(db, select(func.count()).select_from(Client)),
        sales_today=await count_sales_between(db, start, end),
    )

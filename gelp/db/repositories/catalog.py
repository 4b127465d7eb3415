from typing import Iterable, List, Optional, Sequence

from sqlalchemy import exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from gelp.db.models.categories import Category
from gelp.db.models.products import Product
from gelp.db.models.sale_items import SaleItem


async def get_category_by_id(
    db: AsyncSession,
    category_id: int
) -> Optional[Category]:
    result = await db.execute(
        select(Category).where(Category.id == category_id)
    )
    return result.scalar_one_or_none()


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).order_by(Category.name, Category.id)
    )
    return list(result.scalars().all())


async def get_product_by_id(
    db: AsyncSession,
    product_id: int
) -> Optional[Product]:
    result = await db.execute(
        select(Product).where(Product.id == product_id)
    )
    return result.scalar_one_or_none()


async def get_products_by_ids(
    db: AsyncSession,
    product_ids: Iterable[int]
) -> dict:
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(Product).where(Product.id.in_(ids))
    )
    return {p.id: p for p in result.scalars().all()}


async def list_products_with_category(
    db: AsyncSession,
    category_id: Optional[int] = None
) -> Sequence:
    """Products left-joined with their category name, ordered by product name."""
    stmt = (
        select(Product, Category.name.label("category_name"))
        .outerjoin(Category, Product.category_id == Category.id)
        .order_by(Product.name, Product.id)
    )
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    result = await db.execute(stmt)
    return result.all()


async def product_has_sales(
    db: AsyncSession,
    product_id: int
) -> bool:
    result = await db.execute(
        select(exists().where(SaleItem.product_id == product_id))
    )
    return bool(result.scalar())

# gelp/domain/catalog/service.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gelp.core.errors import ConflictError, NotFoundError
from gelp.db.models.categories import Category
from gelp.db.models.products import Product
from gelp.db.repositories.catalog import (
    get_category_by_id,
    get_product_by_id,
    list_categories,
    list_products_with_category,
    product_has_sales,
)
from .schemas import CategoryIn, ProductIn, ProductOut

logger = logging.getLogger(__name__)


# Categories

async def get_categories(db: AsyncSession) -> List[Category]:
    return await list_categories(db)


async def get_category(
    db: AsyncSession,
    category_id: int
) -> Category:
    category = await get_category_by_id(db, category_id)
    if category is None:
        raise NotFoundError("category", [category_id])
    return category


async def create_category(
    db: AsyncSession,
    data: CategoryIn
) -> Category:
    category = Category(name=data.name, description=data.description)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def update_category(
    db: AsyncSession,
    category_id: int,
    data: CategoryIn
) -> Category:
    category = await get_category(db, category_id)
    category.name = data.name
    category.description = data.description
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(
    db: AsyncSession,
    category_id: int
) -> None:
    # products of the category are detached by the foreign key (SET NULL)
    category = await get_category(db, category_id)
    await db.delete(category)
    await db.commit()
    logger.info("Category %s deleted", category_id)


# Products

def _product_out(product: Product, category_name: Optional[str]) -> ProductOut:
    out = ProductOut.model_validate(product)
    out.category_name = category_name
    return out


async def _require_category(db: AsyncSession, category_id: Optional[int]) -> Optional[Category]:
    if category_id is None:
        return None
    return await get_category(db, category_id)


async def get_products(
    db: AsyncSession,
    category_id: Optional[int] = None
) -> List[ProductOut]:
    rows = await list_products_with_category(db, category_id)
    return [_product_out(product, category_name) for product, category_name in rows]


async def get_product(
    db: AsyncSession,
    product_id: int
) -> ProductOut:
    product = await get_product_by_id(db, product_id)
    if product is None:
        raise NotFoundError("product", [product_id])
    category = await _require_category(db, product.category_id)
    return _product_out(product, category.name if category else None)


async def create_product(
    db: AsyncSession,
    data: ProductIn
) -> ProductOut:
    category = await _require_category(db, data.category_id)
    product = Product(**data.model_dump())
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Product %s created", product.id)
    return _product_out(product, category.name if category else None)


async def update_product(
    db: AsyncSession,
    product_id: int,
    data: ProductIn
) -> ProductOut:
    product = await get_product_by_id(db, product_id)
    if product is None:
        raise NotFoundError("product", [product_id])
    category = await _require_category(db, data.category_id)

    for field, value in data.model_dump().items():
        setattr(product, field, value)
    await db.commit()
    await db.refresh(product)
    return _product_out(product, category.name if category else None)


async def delete_product(
    db: AsyncSession,
    product_id: int
) -> None:
    """Delete a product together with its stock row and stock entries.

    Products referenced by sales are kept so that sale history stays intact;
    mark them inactive instead.
    """
    product = await get_product_by_id(db, product_id)
    if product is None:
        raise NotFoundError("product", [product_id])
    if await product_has_sales(db, product_id):
        raise ConflictError(f"Product {product_id} has sales history; set its status to inactive instead")

    await db.delete(product)
    await db.commit()
    logger.info("Product %s deleted", product_id)

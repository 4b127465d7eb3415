# gelp/api/v1/routes_products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.db.base import get_db
from gelp.domain.catalog import service
from gelp.domain.catalog.schemas import ProductIn, ProductOut

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
async def list_products_endpoint(
    category_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_products(db, category_id)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product_endpoint(
    payload: ProductIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_product(db, payload)


@router.get("/{product_id}", response_model=ProductOut)
async def get_product_endpoint(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product_endpoint(
    product_id: int,
    payload: ProductIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.update_product(db, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_endpoint(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    await service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

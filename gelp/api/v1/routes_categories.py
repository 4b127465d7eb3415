# gelp/api/v1/routes_categories.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.db.base import get_db
from gelp.domain.catalog import service
from gelp.domain.catalog.schemas import CategoryIn, CategoryOut

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
async def list_categories_endpoint(db: AsyncSession = Depends(get_db)):
    return await service.get_categories(db)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category_endpoint(
    payload: CategoryIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_category(db, payload)


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category_endpoint(
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_category(db, category_id)


@router.put("/{category_id}", response_model=CategoryOut)
async def update_category_endpoint(
    category_id: int,
    payload: CategoryIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.update_category(db, category_id, payload)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_endpoint(
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    await service.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# gelp/api/v1/routes_stock.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.db.base import get_db
from gelp.domain.stock import service
from gelp.domain.stock.ledger import StockLedger
from gelp.domain.stock.schemas import (
    StockAdjust,
    StockEntryCreate,
    StockEntryOut,
    StockLevelOut,
    StockListItem,
    StockSet,
)

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("", response_model=List[StockListItem])
async def list_stock_endpoint(db: AsyncSession = Depends(get_db)):
    return await service.list_stock(db)


# declared before /{product_id} so "entries" is never parsed as a product id
@router.get("/entries", response_model=List[StockEntryOut])
async def list_stock_entries_endpoint(
    product_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_stock_entries(db, product_id)


@router.post("/entries", response_model=StockEntryOut, status_code=status.HTTP_201_CREATED)
async def record_stock_entry_endpoint(
    payload: StockEntryCreate,
    db: AsyncSession = Depends(get_db),
):
    return await service.record_stock_entry(db, payload)


@router.get("/{product_id}", response_model=StockLevelOut)
async def get_stock_level_endpoint(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await StockLedger(db).get_level(product_id)


@router.put("/{product_id}", response_model=StockLevelOut)
async def set_stock_level_endpoint(
    product_id: int,
    payload: StockSet,
    db: AsyncSession = Depends(get_db),
):
    async with db.begin():
        level = await StockLedger(db).set_quantity(product_id, payload.quantity)
    return level


@router.post("/{product_id}/adjustments", response_model=StockLevelOut)
async def adjust_stock_level_endpoint(
    product_id: int,
    payload: StockAdjust,
    db: AsyncSession = Depends(get_db),
):
    ledger = StockLedger(db)
    async with db.begin():
        await ledger.adjust(product_id, payload.delta)
    return await ledger.get_level(product_id)

# gelp/api/v1/routes_sales.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.api.deps import get_sale_coordinator
from gelp.db.base import get_db
from gelp.domain.sales.coordinator import SaleCoordinator
from gelp.domain.sales.schemas import SaleCreate, SaleCreated, SaleDetail, SaleListItem
from gelp.domain.sales.service import get_sale_detail, list_sales

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("", response_model=List[SaleListItem])
async def list_sales_endpoint(
    client_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    return await list_sales(db, client_id)


@router.post("", response_model=SaleCreated, status_code=status.HTTP_201_CREATED)
async def register_sale_endpoint(
    payload: SaleCreate,
    response: Response,
    coordinator: SaleCoordinator = Depends(get_sale_coordinator),
):
    result = await coordinator.register_sale(payload)
    if not result.ok:
        # mapped to an HTTP status by the GelpError handler
        raise result.error
    if result.replayed:
        response.status_code = status.HTTP_200_OK
    return SaleCreated(sale_id=result.sale_id, total=result.total, replayed=result.replayed)


@router.get("/{sale_id}", response_model=SaleDetail)
async def get_sale_endpoint(
    sale_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await get_sale_detail(db, sale_id)

# gelp/api/v1/routes_suppliers.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.db.base import get_db
from gelp.domain.partners import service
from gelp.domain.partners.schemas import SupplierIn, SupplierOut

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("", response_model=List[SupplierOut])
async def list_suppliers_endpoint(db: AsyncSession = Depends(get_db)):
    return await service.get_suppliers(db)


@router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
async def create_supplier_endpoint(
    payload: SupplierIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_supplier(db, payload)


@router.get("/{supplier_id}", response_model=SupplierOut)
async def get_supplier_endpoint(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_supplier(db, supplier_id)


@router.put("/{supplier_id}", response_model=SupplierOut)
async def update_supplier_endpoint(
    supplier_id: int,
    payload: SupplierIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.update_supplier(db, supplier_id, payload)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier_endpoint(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    await service.delete_supplier(db, supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# gelp/api/v1/routes_clients.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.db.base import get_db
from gelp.domain.partners import service
from gelp.domain.partners.schemas import ClientIn, ClientOut

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=List[ClientOut])
async def list_clients_endpoint(
    cpf: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_clients(db, cpf)


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
async def create_client_endpoint(
    payload: ClientIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.create_client(db, payload)


@router.get("/{client_id}", response_model=ClientOut)
async def get_client_endpoint(
    client_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await service.get_client(db, client_id)


@router.put("/{client_id}", response_model=ClientOut)
async def update_client_endpoint(
    client_id: int,
    payload: ClientIn,
    db: AsyncSession = Depends(get_db),
):
    return await service.update_client(db, client_id, payload)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client_endpoint(
    client_id: int,
    db: AsyncSession = Depends(get_db),
):
    await service.delete_client(db, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

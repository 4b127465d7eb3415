from typing import List, Optional

from sqlalchemy import exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from gelp.db.models.clients import Client
from gelp.db.models.sales import Sale
from gelp.db.models.suppliers import Supplier


async def get_client_by_id(
    db: AsyncSession,
    client_id: int
) -> Optional[Client]:
    result = await db.execute(
        select(Client).where(Client.id == client_id)
    )
    return result.scalar_one_or_none()


async def get_client_by_cpf(
    db: AsyncSession,
    cpf: str
) -> Optional[Client]:
    result = await db.execute(
        select(Client).where(Client.cpf == cpf)
    )
    return result.scalar_one_or_none()


async def list_clients(db: AsyncSession) -> List[Client]:
    result = await db.execute(
        select(Client).order_by(Client.name, Client.id)
    )
    return list(result.scalars().all())


async def client_has_sales(
    db: AsyncSession,
    client_id: int
) -> bool:
    result = await db.execute(
        select(exists().where(Sale.client_id == client_id))
    )
    return bool(result.scalar())


async def get_supplier_by_id(
    db: AsyncSession,
    supplier_id: int
) -> Optional[Supplier]:
    result = await db.execute(
        select(Supplier).where(Supplier.id == supplier_id)
    )
    return result.scalar_one_or_none()


async def list_suppliers(db: AsyncSession) -> List[Supplier]:
    result = await db.execute(
        select(Supplier).order_by(Supplier.name, Supplier.id)
    )
    return list(result.scalars().all())

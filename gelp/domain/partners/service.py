# gelp/domain/partners/service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.core.errors import ConflictError, NotFoundError
from gelp.db.models.clients import Client
from gelp.db.models.suppliers import Supplier
from gelp.db.repositories.partners import (
    client_has_sales,
    get_client_by_cpf,
    get_client_by_id,
    get_supplier_by_id,
    list_clients,
    list_suppliers,
)
from .schemas import ClientIn, SupplierIn, normalize_cpf

logger = logging.getLogger(__name__)


# Clients

async def get_clients(
    db: AsyncSession,
    cpf: Optional[str] = None
) -> List[Client]:
    if cpf is not None:
        client = await get_client_by_cpf(db, normalize_cpf(cpf) or "")
        return [client] if client is not None else []
    return await list_clients(db)


async def get_client(
    db: AsyncSession,
    client_id: int
) -> Client:
    client = await get_client_by_id(db, client_id)
    if client is None:
        raise NotFoundError("client", [client_id])
    return client


async def _ensure_cpf_free(db: AsyncSession, cpf: Optional[str], client_id: Optional[int] = None) -> None:
    if cpf is None:
        return
    owner = await get_client_by_cpf(db, cpf)
    if owner is not None and owner.id != client_id:
        raise ConflictError(f"CPF already registered for client {owner.id}")


async def _commit_client(db: AsyncSession, client: Client) -> Client:
    try:
        await db.commit()
    except IntegrityError:
        # lost a race on the unique CPF
        await db.rollback()
        raise ConflictError("CPF already registered") from None
    await db.refresh(client)
    return client


async def create_client(
    db: AsyncSession,
    data: ClientIn
) -> Client:
    await _ensure_cpf_free(db, data.cpf)
    client = Client(**data.model_dump())
    db.add(client)
    return await _commit_client(db, client)


async def update_client(
    db: AsyncSession,
    client_id: int,
    data: ClientIn
) -> Client:
    client = await get_client(db, client_id)
    await _ensure_cpf_free(db, data.cpf, client_id)
    for field, value in data.model_dump().items():
        setattr(client, field, value)
    return await _commit_client(db, client)


async def delete_client(
    db: AsyncSession,
    client_id: int
) -> None:
    client = await get_client(db, client_id)
    if await client_has_sales(db, client_id):
        raise ConflictError(f"Client {client_id} has sales and cannot be deleted")
    await db.delete(client)
    await db.commit()
    logger.info("Client %s deleted", client_id)


# Suppliers

async def get_suppliers(db: AsyncSession) -> List[Supplier]:
    return await list_suppliers(db)


async def get_supplier(
    db: AsyncSession,
    supplier_id: int
) -> Supplier:
    supplier = await get_supplier_by_id(db, supplier_id)
    if supplier is None:
        raise NotFoundError("supplier", [supplier_id])
    return supplier


async def create_supplier(
    db: AsyncSession,
    data: SupplierIn
) -> Supplier:
    supplier = Supplier(**data.model_dump())
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)
    return supplier


async def update_supplier(
    db: AsyncSession,
    supplier_id: int,
    data: SupplierIn
) -> Supplier:
    supplier = await get_supplier(db, supplier_id)
    for field, value in data.model_dump().items():
        setattr(supplier, field, value)
    await db.commit()
    await db.refresh(supplier)
    return supplier


async def delete_supplier(
    db: AsyncSession,
    supplier_id: int
) -> None:
    # stock entries keep their history with supplier_id set to NULL
    supplier = await get_supplier(db, supplier_id)
    await db.delete(supplier)
    await db.commit()
    logger.info("Supplier %s deleted", supplier_id)

"""
Pytest configuration shared by the GELP test suite.

Every test gets its own file-backed SQLite database under ``tmp_path`` so
that concurrent sessions (and their locking) behave like a real deployment.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import httpx
import pytest
from sqlalchemy import func, select

from gelp.core.config import Settings
from gelp.core.time import utc_now
from gelp.db.base import Database
from gelp.db.models.clients import Client
from gelp.db.models.products import Product
from gelp.db.models.sale_items import SaleItem
from gelp.db.models.sales import Sale
from gelp.db.repositories.stock import upsert_quantity
from gelp.domain.stock.ledger import StockLedger
from gelp.main import create_app


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'gelp_test.db'}"


@pytest.fixture
async def database(db_url):
    db = Database(db_url, lock_timeout=5.0)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def settings(db_url) -> Settings:
    return Settings(DB_URL=db_url, SALE_TIMEOUT_SECONDS=10.0, REPORT_TIMEZONE="UTC", LOG_LEVEL="WARNING")


@pytest.fixture
async def client(settings, database):
    app = create_app(settings, database=database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_product(database):
    """Factory: insert a product (and optionally its stock row), return its id."""

    async def _make(
        name: str = "Widget",
        price: str = "2.50",
        quantity: Optional[int] = None,
        status: str = "active",
    ) -> int:
        async with database.session() as s:
            async with s.begin():
                product = Product(name=name, price=Decimal(price), status=status)
                s.add(product)
                await s.flush()
                if quantity is not None:
                    await upsert_quantity(s, product.id, quantity, utc_now())
            return product.id

    return _make


@pytest.fixture
def make_client(database):
    async def _make(name: str = "Maria Silva", cpf: Optional[str] = None) -> int:
        async with database.session() as s:
            async with s.begin():
                c = Client(name=name, cpf=cpf)
                s.add(c)
                await s.flush()
            return c.id

    return _make


@pytest.fixture
def stock_of(database):
    """Read a product's committed quantity through a fresh session."""

    async def _read(product_id: int) -> int:
        async with database.session() as s:
            return await StockLedger(s).get_quantity(product_id)

    return _read


@pytest.fixture
def sale_ids(database):
    """Ids of every committed sale, ascending."""

    async def _read():
        async with database.session() as s:
            result = await s.execute(select(Sale.id).order_by(Sale.id))
            return list(result.scalars().all())

    return _read


@pytest.fixture
def line_item_count(database):
    async def _read(sale_id: int) -> int:
        async with database.session() as s:
            result = await s.execute(
                select(func.count()).select_from(SaleItem).where(SaleItem.sale_id == sale_id)
            )
            return int(result.scalar_one())

    return _read


@pytest.fixture
def stored_sale(database):
    """Load a committed sale row through a fresh session."""

    async def _read(sale_id: int) -> Sale:
        async with database.session() as s:
            return await s.get(Sale, sale_id)

    return _read

# gelp/domain/sales/service.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gelp.core.errors import NotFoundError
from gelp.db.repositories.sales import get_line_items_for_sale, get_sale_header, list_sales_with_client
from .schemas import SaleDetail, SaleItemOut, SaleListItem


async def get_sale_detail(
    db: AsyncSession,
    sale_id: int
) -> SaleDetail:
    row = await get_sale_header(db, sale_id)
    if row is None:
        raise NotFoundError("sale", [sale_id])
    sale, client_name = row

    items = await get_line_items_for_sale(db, sale_id)
    return SaleDetail(
        id=sale.id,
        sale_date=sale.sale_date,
        total=sale.total,
        status=sale.status,
        client_id=sale.client_id,
        client_name=client_name,
        items=[
            SaleItemOut(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=Decimal(item.quantity) * item.unit_price,
            )
            for item in items
        ],
    )


async def list_sales(
    db: AsyncSession,
    client_id: Optional[int] = None
) -> List[SaleListItem]:
    rows = await list_sales_with_client(db, client_id)
    return [
        SaleListItem(
            id=sale.id,
            sale_date=sale.sale_date,
            total=sale.total,
            status=sale.status,
            client_id=sale.client_id,
            client_name=client_name,
        )
        for sale, client_name in rows
    ]

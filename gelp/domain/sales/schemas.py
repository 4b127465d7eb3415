# gelp/domain/sales/schemas.py
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from gelp.core.time import UtcDatetime
from gelp.domain.common import MAX_QUANTITY


class SaleItemCreate(BaseModel):
    # camelCase aliases keep the legacy frontend payloads working
    product_id: int = Field(validation_alias=AliasChoices("product_id", "productId"))
    quantity: int = Field(le=MAX_QUANTITY)
    unit_price: Decimal = Field(
        max_digits=18,
        decimal_places=2,
        validation_alias=AliasChoices("unit_price", "unitPrice"),
    )


class SaleCreate(BaseModel):
    """Sale request. Any total sent by the caller is ignored and recomputed."""

    client_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("client_id", "clientId"))
    items: List[SaleItemCreate] = Field(default_factory=list)
    idempotency_key: Optional[str] = Field(
        default=None,
        max_length=128,
        validation_alias=AliasChoices("idempotency_key", "idempotencyKey"),
    )


class SaleCreated(BaseModel):
    sale_id: int
    total: Decimal
    replayed: bool = False


class SaleListItem(BaseModel):
    id: int
    sale_date: UtcDatetime
    total: Decimal
    status: str
    client_id: Optional[int]
    client_name: Optional[str]


class SaleItemOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class SaleDetail(BaseModel):
    id: int
    sale_date: UtcDatetime
    total: Decimal
    status: str
    client_id: Optional[int]
    client_name: Optional[str]
    items: List[SaleItemOut]

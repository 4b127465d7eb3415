# gelp/domain/stock/schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gelp.core.time import UtcDatetime
from gelp.domain.common import MAX_QUANTITY


class StockLevelOut(BaseModel):
    product_id: int
    quantity: int
    last_updated: Optional[UtcDatetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockListItem(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    last_updated: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


class StockSet(BaseModel):
    # sign is checked by the ledger so that the error is reported as InvalidQuantity
    quantity: int = Field(le=MAX_QUANTITY)


class StockAdjust(BaseModel):
    delta: int = Field(ge=-MAX_QUANTITY, le=MAX_QUANTITY)


class StockEntryCreate(BaseModel):
    product_id: int
    supplier_id: Optional[int] = None
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=18, decimal_places=2)
    entry_date: Optional[datetime] = None
    expiry_date: Optional[date] = None
    lot_number: Optional[str] = Field(default=None, max_length=64)


class StockEntryOut(BaseModel):
    id: int
    product_id: int
    supplier_id: Optional[int]
    quantity: int
    unit_cost: Decimal
    entry_date: UtcDatetime
    expiry_date: Optional[date]
    lot_number: Optional[str]

    model_config = ConfigDict(from_attributes=True)

# gelp/domain/catalog/schemas.py
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gelp.domain.common import Name

ProductStatus = Literal["active", "inactive"]


class CategoryIn(BaseModel):
    name: Name
    description: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    name: Name
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=18, decimal_places=2)
    status: ProductStatus = "active"
    category_id: Optional[int] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    status: ProductStatus
    category_id: Optional[int]
    category_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

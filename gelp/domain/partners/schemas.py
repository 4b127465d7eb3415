# gelp/domain/partners/schemas.py
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from gelp.domain.common import Name


def normalize_cpf(value: Optional[str]) -> Optional[str]:
    """Keep only the digits of a CPF; blank becomes None."""
    if value is None:
        return None
    digits = re.sub(r"\D", "", value)
    return digits or None


class ClientIn(BaseModel):
    name: Name
    cpf: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("cpf")
    @classmethod
    def _normalize_cpf(cls, value: Optional[str]) -> Optional[str]:
        cpf = normalize_cpf(value)
        if cpf is not None and len(cpf) != 11:
            raise ValueError("CPF must have 11 digits")
        return cpf

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ClientOut(BaseModel):
    id: int
    name: str
    cpf: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class SupplierIn(BaseModel):
    name: Name
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SupplierOut(BaseModel):
    id: int
    name: str
    contact_name: Optional[str]
    phone: Optional[str]
    email: Optional[str]

    model_config = ConfigDict(from_attributes=True)

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from gelp.db.base import Base


class Client(Base):
    __tablename__ = "clients"

    """A registered customer. Sales without a client are walk-in sales."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    # digits only; unique when present
    cpf = Column(String(11), nullable=True, unique=True)
    email = Column(String(254), nullable=True)
    phone = Column(String(40), nullable=True)
    address = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

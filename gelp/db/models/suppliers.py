from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from gelp.db.base import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    contact_name = Column(String(200), nullable=True)
    phone = Column(String(40), nullable=True)
    email = Column(String(254), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

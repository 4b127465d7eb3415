from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from gelp.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    """Product grouping used by the catalog listing and filters."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

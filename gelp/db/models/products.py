from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from gelp.db.base import Base


class Product(Base):
    __tablename__ = "products"

    """Represents a sellable product of the store catalog.

    The price stored here is the current list price. Sales capture their own
    unit price on each line item, so changing it never rewrites history.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)

    price = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default="active")

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("status IN ('active', 'inactive')", name="ck_products_status"),
    )

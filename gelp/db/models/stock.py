from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func

from gelp.db.base import Base


class StockLevel(Base):
    __tablename__ = "stock"

    """On-hand quantity of a single product.

    At most one row per product (upsert semantics). The row is created on the
    first stock-affecting operation and removed together with its product.
    The CHECK constraint is the last line of defence for non-negative stock;
    the stock ledger rejects such writes before they reach the database.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    quantity = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
    )

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.sql import func

from gelp.db.base import Base


class StockEntry(Base):
    __tablename__ = "stock_entries"

    """A goods receipt: quantity of a product received, optionally from a supplier.

    Recording an entry increments the product's stock level in the same
    database transaction. Lot and expiry data are kept for traceability only.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Numeric(18, 2), nullable=False, default=0)

    entry_date = Column(DateTime(timezone=True), nullable=False)
    expiry_date = Column(Date, nullable=True)
    lot_number = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_entries_quantity_positive"),
        CheckConstraint("unit_cost >= 0", name="ck_stock_entries_unit_cost_non_negative"),
        Index("ix_stock_entries_product_date", "product_id", "entry_date"),
    )

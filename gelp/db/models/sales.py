from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from gelp.db.base import Base


class Sale(Base):
    __tablename__ = "sales"

    """Sale header (receipt) with its server-computed total.

    A sale is written together with all of its line items and stock
    decrements, and is immutable afterwards. ``client_id`` is null for
    walk-in sales. ``idempotency_key`` lets a caller retry a submission
    without recording the sale twice.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_date = Column(DateTime(timezone=True), nullable=False, index=True)
    total = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default="completed")

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    idempotency_key = Column(String(128), nullable=True, unique=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_sales_total_non_negative"),
        CheckConstraint("status IN ('completed', 'pending', 'cancelled')", name="ck_sales_status"),
    )

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String

from gelp.db.base import Base


class SaleItem(Base):
    __tablename__ = "sale_items"

    """A product line within a sale.

    Unit price and product name are captured at the time of sale so that the
    sale stays readable when the catalog changes. The subtotal is always
    derived as quantity * unit_price and never stored.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    product_name = Column(String(200), nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_sale_items_unit_price_non_negative"),
    )

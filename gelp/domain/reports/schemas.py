# gelp/domain/reports/schemas.py
from pydantic import BaseModel


class DashboardCounts(BaseModel):
    total_products: int
    products_in_stock: int
    total_clients: int
    sales_today: int

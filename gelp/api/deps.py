# gelp/api/deps.py
from fastapi import Request

from gelp.core.config import Settings
from gelp.domain.sales.coordinator import SaleCoordinator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sale_coordinator(request: Request) -> SaleCoordinator:
    settings: Settings = request.app.state.settings
    return SaleCoordinator(request.app.state.db, timeout=settings.SALE_TIMEOUT_SECONDS)

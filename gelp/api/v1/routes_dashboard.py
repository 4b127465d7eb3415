# gelp/api/v1/routes_dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gelp.api.deps import get_settings
from gelp.core.config import Settings
from gelp.db.base import get_db
from gelp.domain.reports.schemas import DashboardCounts
from gelp.domain.reports.service import get_dashboard_counts

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardCounts)
async def dashboard_endpoint(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await get_dashboard_counts(db, settings.REPORT_TIMEZONE)

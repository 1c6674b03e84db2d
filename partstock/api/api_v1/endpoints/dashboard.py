"""Dashboard API"""

from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.config import settings
from partstock.core.deps import get_db
from partstock.schemas.dashboard import DashboardData
from partstock.services.dashboard import build_dashboard, trend_start
from partstock.services.mutations import current_year_month
from partstock.services.store import RecordStore
from partstock.api.api_v1.endpoints.inventory import load_view_rows

router = APIRouter()


@router.get("/", response_model=DashboardData)
async def get_dashboard(
    *,
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$")) -> Any:
    """Totals for the month plus the recent inbound trend"""
    month = month or current_year_month()
    rows = await load_view_rows(db, month)
    events = await RecordStore(db).list_inbound_events_since(
        trend_start(date.today(), settings.DASHBOARD_TREND_MONTHS))
    return build_dashboard(month, rows, events)

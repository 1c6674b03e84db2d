"""Alert API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.deps import get_db
from partstock.schemas.alert import AlertListResponse
from partstock.services.classifier import build_alerts
from partstock.services.mutations import current_year_month
from partstock.api.api_v1.endpoints.inventory import load_view_rows

router = APIRouter()


@router.get("/", response_model=AlertListResponse)
async def list_alerts(
    *,
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$")) -> Any:
    """Out-of-stock, low-stock and high-demand alerts, most severe first"""
    month = month or current_year_month()
    alerts = build_alerts(await load_view_rows(db, month))
    return AlertListResponse(data=alerts, total=len(alerts), month=month)

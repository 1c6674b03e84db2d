"""Edit history API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.deps import get_db
from partstock.models.edit_history import EditHistory
from partstock.schemas.edit_history import EditHistoryResponse, EditHistoryListResponse
from partstock.services.store import RecordStore

router = APIRouter()


def build_history_response(entry: EditHistory) -> EditHistoryResponse:
    return EditHistoryResponse(
        id=entry.id,
        order_id=entry.order_id,
        actor_name=entry.actor_name,
        changes=entry.changes or [],
        changed_fields_display=entry.changed_fields_display,
        created_at=entry.created_at)


@router.get("/", response_model=EditHistoryListResponse)
async def list_history(
    *,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    order_id: Optional[int] = Query(None)) -> Any:
    """Edit history, newest first"""
    entries, total = await RecordStore(db).list_audit_entries(order_id=order_id, page=page, limit=limit)

    return EditHistoryListResponse(
        data=[build_history_response(e) for e in entries],
        total=total,
        page=page,
        limit=limit
    )

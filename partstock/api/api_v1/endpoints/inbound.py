"""Inbound registration API"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.deps import get_db, get_actor_name
from partstock.schemas.inventory import InboundCreate, InboundResponse
from partstock.services.mutations import register_inbound

router = APIRouter()


@router.post("/", response_model=InboundResponse)
async def create_inbound(
    *,
    db: AsyncSession = Depends(get_db),
    actor_name: str = Depends(get_actor_name),
    inbound_in: InboundCreate) -> Any:
    """Register an inbound delivery for the current month"""
    return await register_inbound(db, inbound_in, actor_name=inbound_in.actor_name or actor_name)

"""Dependencies"""
from typing import AsyncGenerator, Optional

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.config import settings
from partstock.db.session import SessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency
    """
    async with SessionLocal() as session:
        yield session


async def get_actor_name(x_actor_name: Optional[str] = Header(None)) -> str:
    """
    Display name recorded in edit history when the body does not carry one
    """
    if x_actor_name and x_actor_name.strip():
        return x_actor_name.strip()
    return settings.DEFAULT_ACTOR_NAME

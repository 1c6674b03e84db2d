import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine

from partstock.db.session import engine
from partstock.db.base import Base

# Import every model so the tables are registered on Base.metadata
from partstock.models import OrderRegister, MonthlyData, InRegister, EditHistory  # noqa: F401


async def ensure_tables_exist(bind: AsyncEngine = engine) -> None:
    """
    Create any missing tables (called on application startup)
    """
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())

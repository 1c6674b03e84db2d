"""
Pytest configuration and fixtures

Each test gets its own SQLite file database under tmp_path.
"""
import os
import tempfile

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "partstock-test-logs"))

import pytest

from partstock.db.base import Base
from partstock.db.session import create_engine_for, create_session_factory
from partstock.models import OrderRegister, MonthlyData


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed_order(session_factory):
    """Insert an order (and optionally its override for one month) and return its id"""
    async def _seed(company="Myungjin", model="9BUB", part_number="GA29120A", part_name="SIDE WINDOW DEF LH",
                    inbound=0, outbound=0, ordered=0, note="", month=None, **override):
        async with session_factory() as session:
            order = OrderRegister(
                company=company, model=model, part_number=part_number, part_name=part_name,
                note=note, inbound_qty_total=inbound, outbound_qty_total=outbound, order_qty_total=ordered)
            session.add(order)
            await session.flush()
            if month is not None:
                session.add(MonthlyData(year_month=month, order_id=order.id, **override))
            await session.commit()
            return order.id
    return _seed

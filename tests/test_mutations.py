from datetime import date

import pytest
from sqlalchemy import select, func

from partstock.core.exceptions import NotFoundError, StoreError, ValidationError
from partstock.models import OrderRegister, MonthlyData, InRegister, EditHistory
from partstock.schemas.inventory import InboundCreate, OrderUpdate
from partstock.services import mutations
from partstock.services.store import RecordStore

MONTH = "2024-05"


async def count(session_factory, model, *conditions):
    async with session_factory() as session:
        query = select(func.count()).select_from(model)
        if conditions:
            query = query.where(*conditions)
        return (await session.execute(query)).scalar()


async def load_override(session_factory, order_id, month=MONTH):
    async with session_factory() as session:
        result = await session.execute(
            select(MonthlyData).where(MonthlyData.order_id == order_id, MonthlyData.year_month == month))
        return result.scalar_one_or_none()


async def load_history(session_factory, order_id):
    async with session_factory() as session:
        result = await session.execute(select(EditHistory).where(EditHistory.order_id == order_id))
        return list(result.scalars().all())


def inbound(**kwargs):
    data = dict(company="Myungjin", model="9BUB", part_number="GA29120A", part_name="SIDE WINDOW DEF LH",
                in_date=date(2024, 5, 3), inbound_qty=100, order_qty=120)
    data.update(kwargs)
    return InboundCreate(**data)


# ===== register_inbound =====

async def test_register_inbound_creates_order_event_and_override(db, session_factory):
    result = await mutations.register_inbound(db, inbound(), actor_name="kim", year_month=MONTH)

    assert result.created is True
    assert result.row.inbound_qty == 100
    assert result.row.stock_qty == 100
    assert result.row.order_qty == 120
    assert result.row.shortage == "-20"

    async with session_factory() as session:
        order = await session.get(OrderRegister, result.order_id)
    assert (order.inbound_qty_total, order.outbound_qty_total, order.order_qty_total) == (0, 0, 0)

    assert await count(session_factory, InRegister, InRegister.order_id == result.order_id) == 1
    monthly = await load_override(session_factory, result.order_id)
    assert (monthly.inbound_qty, monthly.stock_qty, monthly.order_qty) == (100, 100, 120)


async def test_register_inbound_reuses_order_and_replaces_month(db, session_factory):
    first = await mutations.register_inbound(db, inbound(inbound_qty=100), actor_name="kim", year_month=MONTH)
    second = await mutations.register_inbound(db, inbound(inbound_qty=30, order_qty=50), actor_name="kim", year_month=MONTH)

    assert second.created is False
    assert second.order_id == first.order_id
    assert await count(session_factory, OrderRegister) == 1
    assert await count(session_factory, InRegister) == 2

    monthly = await load_override(session_factory, first.order_id)
    assert (monthly.inbound_qty, monthly.stock_qty, monthly.order_qty) == (30, 30, 50)


async def test_register_inbound_subtracts_outbound_of_existing_override(db, session_factory, seed_order):
    order_id = await seed_order(outbound=40, month=MONTH, outbound_qty=7, inbound_qty=1, stock_qty=1)

    result = await mutations.register_inbound(db, inbound(inbound_qty=20), actor_name="kim", year_month=MONTH)

    assert result.order_id == order_id
    assert result.row.stock_qty == 13
    assert result.row.outbound_qty == 7


async def test_register_inbound_ignores_cumulative_outbound_without_override(db, seed_order):
    await seed_order(inbound=500, outbound=40)

    result = await mutations.register_inbound(db, inbound(inbound_qty=20), actor_name="kim", year_month=MONTH)

    assert result.row.stock_qty == 20


async def test_register_inbound_records_changed_fields(db, session_factory):
    result = await mutations.register_inbound(db, inbound(), actor_name="kim", year_month=MONTH)

    history = await load_history(session_factory, result.order_id)
    assert len(history) == 1
    assert history[0].actor_name == "kim"
    assert {c["field"] for c in history[0].changes} == {"inbound_qty", "stock_qty", "order_qty"}


@pytest.mark.parametrize("field", ["company", "model", "part_number"])
async def test_register_inbound_requires_natural_key(db, session_factory, field):
    with pytest.raises(ValidationError):
        await mutations.register_inbound(db, inbound(**{field: "  "}), actor_name="kim", year_month=MONTH)

    assert await count(session_factory, OrderRegister) == 0


async def test_register_inbound_rolls_back_when_override_write_fails(db, session_factory, monkeypatch):
    async def failing_upsert(self, *args, **kwargs):
        raise StoreError("upsert monthly override failed: disk I/O error")

    monkeypatch.setattr(RecordStore, "upsert_monthly_override", failing_upsert)

    with pytest.raises(StoreError):
        await mutations.register_inbound(db, inbound(), actor_name="kim", year_month=MONTH)

    assert await count(session_factory, OrderRegister) == 0
    assert await count(session_factory, InRegister) == 0


async def test_register_inbound_reuses_order_created_concurrently(db, session_factory, seed_order, monkeypatch):
    existing_id = await seed_order(company="Myungjin", model="9BUB", part_number="GA29120A")
    original = RecordStore.find_order
    calls = []

    async def late_find(self, *args):
        calls.append(args)
        # The first lookup runs before the other request's insert is visible
        if len(calls) == 1:
            return None
        return await original(self, *args)

    monkeypatch.setattr(RecordStore, "find_order", late_find)

    result = await mutations.register_inbound(db, inbound(), actor_name="kim", year_month=MONTH)

    assert result.order_id == existing_id
    assert result.created is False
    assert await count(session_factory, OrderRegister) == 1
    assert await count(session_factory, InRegister) == 1


# ===== edit_cell =====

async def test_inbound_delta_moves_stock(db, session_factory, seed_order):
    order_id = await seed_order(inbound=50, outbound=0, ordered=80)

    row = await mutations.edit_cell(db, order_id, "inbound_qty", "+10", actor_name="lee", year_month=MONTH)

    assert row.inbound_qty == 60
    assert row.stock_qty == 60
    assert row.order_qty == 80

    monthly = await load_override(session_factory, order_id)
    assert (monthly.inbound_qty, monthly.stock_qty, monthly.order_qty, monthly.outbound_qty) == (60, 60, 80, 0)

    history = await load_history(session_factory, order_id)
    assert len(history) == 1
    assert history[0].actor_name == "lee"
    assert history[0].changes == [{"field": "inbound_qty", "old_value": 50, "new_value": 60}]


async def test_stock_delta_leaves_inbound_alone(db, seed_order):
    order_id = await seed_order(inbound=50, outbound=0)

    row = await mutations.edit_cell(db, order_id, "stock_qty", "-5", actor_name="lee", year_month=MONTH)

    assert row.inbound_qty == 50
    assert row.stock_qty == 45


async def test_absolute_inbound_edit_shifts_stock_by_difference(db, seed_order):
    order_id = await seed_order(inbound=50, outbound=10, month=MONTH, stock_qty=25)

    row = await mutations.edit_cell(db, order_id, "inbound_qty", "45", actor_name="lee", year_month=MONTH)

    assert row.inbound_qty == 45
    assert row.stock_qty == 20
    assert row.outbound_qty == 10


async def test_order_edit_only_touches_order(db, seed_order):
    order_id = await seed_order(inbound=50, outbound=0, ordered=10)

    row = await mutations.edit_cell(db, order_id, "order_qty", "120", actor_name="lee", year_month=MONTH)

    assert (row.inbound_qty, row.stock_qty, row.order_qty) == (50, 50, 120)
    assert row.shortage == "-70"


@pytest.mark.parametrize("raw", ["50", "+0", "-0", "+abc"])
async def test_unchanged_value_writes_override_but_no_history(db, session_factory, seed_order, raw):
    order_id = await seed_order(inbound=50, outbound=0, ordered=70)

    row = await mutations.edit_cell(db, order_id, "inbound_qty", raw, actor_name="lee", year_month=MONTH)

    assert row.inbound_qty == 50
    assert await load_history(session_factory, order_id) == []
    monthly = await load_override(session_factory, order_id)
    assert (monthly.inbound_qty, monthly.outbound_qty, monthly.stock_qty, monthly.order_qty) == (50, 0, 50, 70)


@pytest.mark.parametrize("field,raw", [
    ("stock_qty", "99999999999999999999"),
    ("order_qty", "+9223372036854775807"),
    ("inbound_qty", "9223372036854775808"),
])
async def test_edit_cell_rejects_out_of_range_values(db, session_factory, seed_order, field, raw):
    order_id = await seed_order(inbound=50, ordered=10)

    with pytest.raises(ValidationError):
        await mutations.edit_cell(db, order_id, field, raw, actor_name="lee", year_month=MONTH)

    assert await load_override(session_factory, order_id) is None
    assert await load_history(session_factory, order_id) == []


async def test_edit_cell_rejects_other_fields(db, seed_order):
    order_id = await seed_order()

    with pytest.raises(ValidationError):
        await mutations.edit_cell(db, order_id, "outbound_qty", "5", actor_name="lee", year_month=MONTH)


async def test_edit_cell_unknown_order(db):
    with pytest.raises(NotFoundError):
        await mutations.edit_cell(db, 999, "stock_qty", "5", actor_name="lee", year_month=MONTH)


async def test_edit_cell_rolls_back_when_history_write_fails(db, session_factory, seed_order, monkeypatch):
    order_id = await seed_order(inbound=50)

    async def failing_append(self, *args, **kwargs):
        raise StoreError("append edit history failed: database is locked")

    monkeypatch.setattr(RecordStore, "append_audit_entry", failing_append)

    with pytest.raises(StoreError):
        await mutations.edit_cell(db, order_id, "stock_qty", "+1", actor_name="lee", year_month=MONTH)

    assert await load_override(session_factory, order_id) is None


# ===== update_order / delete_order =====

async def test_update_order_writes_counters_override_and_history(db, session_factory, seed_order):
    order_id = await seed_order(inbound=50, outbound=5, ordered=60, note="old")

    row = await mutations.update_order(
        db, order_id, OrderUpdate(outbound_qty=8, note="checked"), actor_name="park", year_month=MONTH)

    assert row.outbound_qty == 8
    assert row.inbound_qty == 50
    assert row.stock_qty == 45
    assert row.note == "checked"

    async with session_factory() as session:
        order = await session.get(OrderRegister, order_id)
    assert (order.inbound_qty_total, order.outbound_qty_total, order.order_qty_total) == (50, 8, 60)
    assert order.note == "checked"

    history = await load_history(session_factory, order_id)
    assert len(history) == 1
    assert {c["field"] for c in history[0].changes} == {"outbound_qty", "note"}
    assert history[0].changed_fields_display == ["Outbound", "Note"]


async def test_delete_order_removes_dependent_rows(db, session_factory, seed_order):
    order_id = await seed_order(inbound=5, month=MONTH, stock_qty=5)
    await mutations.edit_cell(db, order_id, "stock_qty", "+1", actor_name="lee", year_month=MONTH)
    other_id = await seed_order(part_number="OTHER", month=MONTH, stock_qty=3)

    await mutations.delete_order(db, order_id)

    assert await count(session_factory, OrderRegister) == 1
    assert await count(session_factory, MonthlyData, MonthlyData.order_id == order_id) == 0
    assert await count(session_factory, EditHistory) == 0
    assert await load_override(session_factory, other_id) is not None


async def test_delete_unknown_order(db):
    with pytest.raises(NotFoundError):
        await mutations.delete_order(db, 42)

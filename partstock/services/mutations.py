"""
Inventory mutations

Write paths that keep the cumulative order register and the current month's
override consistent:
- register_inbound: inbound delivery from the entry form
- edit_cell: single-cell edit with "+N" / "-N" relative input
- update_order: full-row edit of quantities and note
- delete_order: admin delete, including dependent rows
- bulk_import: month load from a spreadsheet (best effort, per row)

Each call runs in one transaction. Nothing is reported as done unless the
commit succeeded; any failure rolls the whole call back.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.exceptions import InventoryError, ValidationError
from partstock.schemas.import_data import ImportResult, RawImportRow
from partstock.schemas.inventory import InboundCreate, InboundResponse, OrderUpdate, ViewRow
from partstock.services.cell_value import check_quantity, parse_cell_value, parse_quantity
from partstock.services.reconciler import reconcile
from partstock.services.store import RecordStore

logger = logging.getLogger(__name__)

EDITABLE_CELLS = ("inbound_qty", "stock_qty", "order_qty")


def current_year_month() -> str:
    """Current month as "YYYY-MM" (UTC)"""
    return datetime.utcnow().strftime("%Y-%m")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def require_natural_key(company: Optional[str], model: Optional[str], part_number: Optional[str]) -> Tuple[str, str, str]:
    key = (_clean(company), _clean(model), _clean(part_number))
    if not all(key):
        raise ValidationError("company, model and part_number are required")
    return key


def diff_rows(before: ViewRow, after: ViewRow, fields: Iterable[str]) -> List[dict]:
    """Change records for every field whose value differs"""
    return [
        {"field": f, "old_value": getattr(before, f), "new_value": getattr(after, f)}
        for f in fields
        if getattr(before, f) != getattr(after, f)
    ]


# ===== Inbound registration =====

async def register_inbound(
    db: AsyncSession,
    data: InboundCreate,
    actor_name: str,
    year_month: Optional[str] = None) -> InboundResponse:
    """
    Register an inbound delivery

    1. find or create the order by (company, model, part_number)
    2. append the delivery to the inbound register
    3. replace inbound / stock / order of this month's override, with
       stock = inbound - outbound already recorded in that override (or 0)
    """
    company, model, part_number = require_natural_key(data.company, data.model, data.part_number)
    year_month = year_month or current_year_month()
    store = RecordStore(db)

    try:
        order, created = await store.get_or_create_order(
            company, model, part_number,
            part_name=_clean(data.part_name),
            note=data.note or "")

        prior = await store.find_monthly_override(year_month, order.id)
        before = reconcile(order, prior)
        prior_outbound = (prior.outbound_qty if prior is not None else None) or 0

        await store.append_inbound_event(order.id, data.in_date, data.inbound_qty)

        monthly = await store.upsert_monthly_override(
            year_month, order.id,
            inbound_qty=data.inbound_qty,
            stock_qty=check_quantity(data.inbound_qty - prior_outbound, "stock_qty"),
            order_qty=data.order_qty)
        after = reconcile(order, monthly)

        changes = diff_rows(before, after, EDITABLE_CELLS)
        if changes:
            await store.append_audit_entry(order.id, actor_name, changes)

        await store.commit()
    except Exception:
        await store.rollback()
        raise

    logger.info(
        f"Inbound registered: order={order.id} ({company}/{part_number}) "
        f"qty={data.inbound_qty} month={year_month} created={created}")
    return InboundResponse(order_id=order.id, created=created, year_month=year_month, row=after)


# ===== Cell edit =====

async def edit_cell(
    db: AsyncSession,
    order_id: int,
    field: str,
    raw_value: str,
    actor_name: str,
    year_month: Optional[str] = None) -> ViewRow:
    """
    Edit one cell of the inventory grid

    "+N" / "-N" adjust the value currently shown, anything else replaces it.
    Editing inbound moves stock by the same amount. The month's override is
    always written; edit history only when the value changed.
    """
    if field not in EDITABLE_CELLS:
        raise ValidationError(f"Field '{field}' cannot be edited (allowed: {', '.join(EDITABLE_CELLS)})")

    year_month = year_month or current_year_month()
    store = RecordStore(db)

    try:
        order = await store.get_order(order_id)
        monthly = await store.find_monthly_override(year_month, order.id)
        before = reconcile(order, monthly)

        old_value = getattr(before, field)
        new_value = check_quantity(parse_cell_value(raw_value, old_value), field)

        inbound_qty = before.inbound_qty
        stock_qty = before.stock_qty
        order_qty = before.order_qty
        if field == "inbound_qty":
            inbound_qty = new_value
            stock_qty = check_quantity(before.stock_qty + (new_value - old_value), "stock_qty")
        elif field == "stock_qty":
            stock_qty = new_value
        else:
            order_qty = new_value

        monthly = await store.upsert_monthly_override(
            year_month, order.id,
            inbound_qty=inbound_qty,
            outbound_qty=before.outbound_qty,
            stock_qty=stock_qty,
            order_qty=order_qty)

        if new_value != old_value:
            await store.append_audit_entry(
                order.id, actor_name,
                [{"field": field, "old_value": old_value, "new_value": new_value}])

        await store.commit()
    except Exception:
        await store.rollback()
        raise

    if new_value == old_value:
        logger.debug(f"Cell edit on order={order_id} {field} left value at {old_value}")
    else:
        logger.info(f"Cell edit by {actor_name}: order={order_id} {field} {old_value} -> {new_value}")
    return reconcile(order, monthly)


# ===== Full-row edit / delete =====

async def update_order(
    db: AsyncSession,
    order_id: int,
    data: OrderUpdate,
    actor_name: str,
    year_month: Optional[str] = None) -> ViewRow:
    """
    Edit quantities and note of one order

    Writes the cumulative counters and the current month's override, and
    records every changed field in one edit-history entry.
    """
    year_month = year_month or current_year_month()
    store = RecordStore(db)

    try:
        order = await store.get_order(order_id)
        monthly = await store.find_monthly_override(year_month, order.id)
        before = reconcile(order, monthly)

        def pick(value, current):
            return current if value is None else value

        inbound_qty = pick(data.inbound_qty, before.inbound_qty)
        outbound_qty = pick(data.outbound_qty, before.outbound_qty)
        stock_qty = pick(data.stock_qty, before.stock_qty)
        order_qty = pick(data.order_qty, before.order_qty)
        note = pick(data.note, before.note)

        await store.update_order(
            order,
            inbound_qty_total=inbound_qty,
            outbound_qty_total=outbound_qty,
            order_qty_total=order_qty,
            note=note)
        monthly = await store.upsert_monthly_override(
            year_month, order.id,
            inbound_qty=inbound_qty,
            outbound_qty=outbound_qty,
            stock_qty=stock_qty,
            order_qty=order_qty)
        after = reconcile(order, monthly)

        changes = diff_rows(before, after, ("inbound_qty", "stock_qty", "order_qty", "outbound_qty", "note"))
        if changes:
            await store.append_audit_entry(order.id, actor_name, changes)

        await store.commit()
    except Exception:
        await store.rollback()
        raise

    logger.info(f"Order {order_id} updated by {actor_name}: {len(changes)} field(s) changed")
    return after


async def delete_order(db: AsyncSession, order_id: int) -> None:
    """Delete an order together with its overrides, inbound events and edit history"""
    store = RecordStore(db)

    try:
        order = await store.get_order(order_id)
        overrides = await store.delete_order_overrides(order.id)
        events = await store.delete_inbound_events(order.id)
        entries = await store.delete_audit_entries(order.id)
        await store.delete_order(order.id)
        await store.commit()
    except Exception:
        await store.rollback()
        raise

    logger.info(
        f"Order {order_id} deleted "
        f"(overrides={overrides}, inbound events={events}, history={entries})")


# ===== Bulk import =====

async def bulk_import(
    db: AsyncSession,
    rows: List[RawImportRow],
    year_month: Optional[str] = None) -> ImportResult:
    """
    Load one month of inventory from spreadsheet rows

    The month's overrides are cleared once up front, then every row is
    processed in order inside its own savepoint. A bad row is reported as
    "Row N: ..." (N counts the header line) and the import moves on.
    Imports are data loads and do not write edit history.
    """
    year_month = year_month or current_year_month()
    store = RecordStore(db)
    result = ImportResult()

    try:
        cleared = await store.delete_monthly_overrides(year_month)
    except InventoryError:
        await store.rollback()
        raise
    logger.info(f"Import for {year_month}: cleared {cleared} override(s), {len(rows)} row(s) to load")

    for index, row in enumerate(rows):
        line = index + 2
        company, model, part_number = _clean(row.company), _clean(row.model), _clean(row.part_number)
        if not (company and model and part_number):
            result.failed_count += 1
            result.errors.append(f"Row {line}: required fields missing (company, model, part_number)")
            continue

        try:
            inbound_qty = check_quantity(parse_quantity(row.inbound_qty), "inbound_qty")
            outbound_qty = check_quantity(parse_quantity(row.outbound_qty), "outbound_qty")
            order_qty = check_quantity(parse_quantity(row.order_qty), "order_qty")
            stock_qty = check_quantity(inbound_qty - outbound_qty, "stock_qty")

            async with db.begin_nested():
                order, created = await store.get_or_create_order(
                    company, model, part_number,
                    part_name=_clean(row.part_name),
                    note=row.note or "")
                if not created:
                    await store.update_order(order, part_name=_clean(row.part_name), note=row.note or "")

                await store.delete_monthly_overrides(year_month, order.id)
                await store.upsert_monthly_override(
                    year_month, order.id,
                    inbound_qty=inbound_qty,
                    outbound_qty=outbound_qty,
                    stock_qty=stock_qty,
                    order_qty=order_qty)
        except InventoryError as e:
            logger.warning(f"Import row {line} failed: {e.message}")
            result.failed_count += 1
            result.errors.append(f"Row {line}: {e.message}")
            continue

        result.success_count += 1

    try:
        await store.commit()
    except InventoryError:
        await store.rollback()
        raise

    logger.info(
        f"Import for {year_month} finished: {result.success_count} ok, {result.failed_count} failed")
    return result

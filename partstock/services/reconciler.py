"""
Stock reconciliation

Merges a cumulative order record with its (optional) monthly override into
the row every screen displays. Each override field falls back to the
cumulative value on its own, so partial overrides are fine.
"""

from typing import Dict, Iterable, List, Optional

from partstock.core.exceptions import ValidationError
from partstock.schemas.inventory import ViewRow

SORTABLE_FIELDS = (
    "company", "model", "part_number", "part_name",
    "inbound_qty", "stock_qty", "shortage", "order_qty", "outbound_qty", "note",
)


def _override(monthly, field: str, fallback: int) -> int:
    value = getattr(monthly, field, None) if monthly is not None else None
    return fallback if value is None else value


def format_shortage(order_qty: int, inbound_qty: int, outbound_qty: int) -> str:
    """
    "-N" when under-received, "+N" when over-received, "0" when balanced
    """
    shortage = order_qty - inbound_qty + outbound_qty
    if shortage < 0:
        return f"+{abs(shortage)}"
    if shortage > 0:
        return f"-{shortage}"
    return "0"


def reconcile(order, monthly=None) -> ViewRow:
    """Build the view row for one order and its override for the month being viewed"""
    inbound_total = order.inbound_qty_total or 0
    outbound_total = order.outbound_qty_total or 0

    inbound_qty = _override(monthly, "inbound_qty", inbound_total)
    outbound_qty = _override(monthly, "outbound_qty", outbound_total)
    order_qty = _override(monthly, "order_qty", order.order_qty_total or 0)
    stock_qty = _override(monthly, "stock_qty", inbound_total - outbound_total)

    return ViewRow(
        id=order.id,
        company=order.company or "",
        model=order.model or "",
        part_number=order.part_number or "",
        part_name=order.part_name or "",
        inbound_qty=inbound_qty,
        stock_qty=stock_qty,
        shortage=format_shortage(order_qty, inbound_qty, outbound_qty),
        order_qty=order_qty,
        outbound_qty=outbound_qty,
        note=order.note or "",
    )


def reconcile_all(orders: Iterable, overrides: Iterable) -> List[ViewRow]:
    """Reconcile every order against the overrides of a single month"""
    by_order: Dict[int, object] = {m.order_id: m for m in overrides}
    return [reconcile(order, by_order.get(order.id)) for order in orders]


def filter_rows(
    rows: Iterable[ViewRow],
    company: Optional[str] = None,
    model: Optional[str] = None,
    part_number: Optional[str] = None) -> List[ViewRow]:
    """Case-insensitive substring filters; empty filters match everything"""
    filters = [
        ("company", (company or "").lower()),
        ("model", (model or "").lower()),
        ("part_number", (part_number or "").lower()),
    ]
    return [
        row for row in rows
        if all(needle in getattr(row, field).lower() for field, needle in filters if needle)
    ]


def sort_rows(rows: Iterable[ViewRow], sort_by: str = "company", descending: bool = False) -> List[ViewRow]:
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(f"Cannot sort by '{sort_by}'")

    def key(row: ViewRow):
        value = getattr(row, sort_by)
        return value.lower() if isinstance(value, str) else value

    return sorted(rows, key=key, reverse=descending)

"""Inventory API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.deps import get_db, get_actor_name
from partstock.schemas.inventory import (
    ViewRow, InventoryListResponse, MonthListResponse, InventoryOptions,
    CellEdit, OrderUpdate
)
from partstock.services import mutations
from partstock.services.export import export_csv
from partstock.services.reconciler import reconcile_all, filter_rows, sort_rows
from partstock.services.store import RecordStore

router = APIRouter()


async def load_view_rows(db: AsyncSession, month: str):
    """Reconciled rows of every order for one month"""
    store = RecordStore(db)
    orders = await store.list_orders()
    overrides = await store.list_monthly_overrides(month)
    return reconcile_all(orders, overrides)


@router.get("/", response_model=InventoryListResponse)
async def list_inventory(
    *,
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM, defaults to the current month"),
    company: Optional[str] = Query(None),
    model: Optional[str] = Query(None),
    part_number: Optional[str] = Query(None),
    sort_by: str = Query("company"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$")) -> Any:
    """Reconciled inventory rows"""
    month = month or mutations.current_year_month()
    rows = await load_view_rows(db, month)
    rows = filter_rows(rows, company=company, model=model, part_number=part_number)
    rows = sort_rows(rows, sort_by=sort_by, descending=sort_order == "desc")

    return InventoryListResponse(data=rows, total=len(rows), month=month)


@router.get("/months", response_model=MonthListResponse)
async def list_months(*, db: AsyncSession = Depends(get_db)) -> Any:
    """Months that have override data, newest first"""
    months = await RecordStore(db).list_months()
    return MonthListResponse(months=months or [mutations.current_year_month()])


@router.get("/options", response_model=InventoryOptions)
async def list_options(*, db: AsyncSession = Depends(get_db)) -> Any:
    """Distinct companies / models / part numbers / part names"""
    return InventoryOptions(**await RecordStore(db).distinct_options())


@router.get("/export")
async def export_inventory(
    *,
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$"),
    company: Optional[str] = Query(None),
    model: Optional[str] = Query(None),
    part_number: Optional[str] = Query(None)) -> Response:
    """CSV download of the reconciled rows"""
    month = month or mutations.current_year_month()
    rows = await load_view_rows(db, month)
    rows = sort_rows(filter_rows(rows, company=company, model=model, part_number=part_number))

    return Response(
        content=export_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="inventory_{month}.csv"'},
    )


@router.patch("/{order_id}/cell", response_model=ViewRow)
async def edit_cell(
    *,
    db: AsyncSession = Depends(get_db),
    actor_name: str = Depends(get_actor_name),
    order_id: int,
    edit_in: CellEdit) -> Any:
    """Edit one cell; "+N" / "-N" adjust the current value"""
    return await mutations.edit_cell(
        db, order_id, edit_in.field, edit_in.value,
        actor_name=edit_in.actor_name or actor_name)


@router.put("/{order_id}", response_model=ViewRow)
async def update_order(
    *,
    db: AsyncSession = Depends(get_db),
    actor_name: str = Depends(get_actor_name),
    order_id: int,
    order_in: OrderUpdate) -> Any:
    """Edit quantities and note of one order"""
    return await mutations.update_order(
        db, order_id, order_in,
        actor_name=order_in.actor_name or actor_name)


@router.delete("/{order_id}")
async def delete_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int) -> Any:
    """Delete an order and everything recorded against it"""
    await mutations.delete_order(db, order_id)
    return {"message": "Order deleted", "id": order_id}

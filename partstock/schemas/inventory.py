"""Inventory schemas"""
from typing import Optional, List
from datetime import date
from pydantic import BaseModel, Field

from partstock.services.cell_value import MAX_QUANTITY, MIN_QUANTITY


# ===== Reconciled row =====
class ViewRow(BaseModel):
    """One display-ready inventory row (cumulative record merged with the month override)"""
    id: int
    company: str
    model: str
    part_number: str
    part_name: str = ""
    inbound_qty: int
    stock_qty: int
    shortage: str = Field(..., description='"+N" over-received, "-N" under-received, "0" balanced')
    order_qty: int
    outbound_qty: int
    note: str = ""


class InventoryListResponse(BaseModel):
    data: List[ViewRow]
    total: int
    month: str


class MonthListResponse(BaseModel):
    months: List[str]


class InventoryOptions(BaseModel):
    """Distinct values for the filter / entry dropdowns"""
    companies: List[str]
    models: List[str]
    part_numbers: List[str]
    part_names: List[str]


# ===== Mutations =====
class CellEdit(BaseModel):
    """Single-cell edit; "+N" / "-N" adjust the current value, anything else replaces it"""
    field: str = Field(..., description="inbound_qty, stock_qty or order_qty")
    value: str = Field(..., max_length=50)
    actor_name: Optional[str] = Field(None, max_length=100)


class OrderUpdate(BaseModel):
    """Full-row edit; omitted fields keep their current value"""
    inbound_qty: Optional[int] = Field(None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    outbound_qty: Optional[int] = Field(None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    stock_qty: Optional[int] = Field(None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    order_qty: Optional[int] = Field(None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    note: Optional[str] = Field(None, max_length=500)
    actor_name: Optional[str] = Field(None, max_length=100)


class InboundCreate(BaseModel):
    """Inbound registration"""
    company: str = Field(..., max_length=100)
    model: str = Field(..., max_length=100)
    part_number: str = Field(..., max_length=100)
    part_name: str = Field(default="", max_length=200)
    in_date: date = Field(default_factory=date.today)
    inbound_qty: int = Field(default=0, ge=0, le=MAX_QUANTITY)
    order_qty: int = Field(default=0, ge=0, le=MAX_QUANTITY)
    note: str = Field(default="", max_length=500)
    actor_name: Optional[str] = Field(None, max_length=100)


class InboundResponse(BaseModel):
    order_id: int
    created: bool
    year_month: str
    row: ViewRow

"""Dashboard schemas"""
from typing import List
from pydantic import BaseModel


class CompanyStock(BaseModel):
    company: str
    total_stock: int
    item_count: int


class TrendPoint(BaseModel):
    month: str
    incoming: int


class DashboardData(BaseModel):
    month: str
    total_items: int
    total_stock: int
    monthly_incoming: int
    monthly_outgoing: int
    net_flow: int
    outgoing_ratio: float
    companies: List[CompanyStock]
    monthly_trend: List[TrendPoint]

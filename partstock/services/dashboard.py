"""
Dashboard statistics built from reconciled rows and the inbound register
"""

from collections import OrderedDict
from datetime import date
from typing import Iterable, List

from partstock.schemas.dashboard import CompanyStock, DashboardData, TrendPoint
from partstock.schemas.inventory import ViewRow


def trend_start(today: date, months: int) -> date:
    """First day of the month `months - 1` months before today's month"""
    index = today.year * 12 + (today.month - 1) - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


def build_dashboard(month: str, rows: List[ViewRow], inbound_events: Iterable) -> DashboardData:
    total_stock = sum(row.stock_qty for row in rows)
    incoming = sum(row.inbound_qty for row in rows)
    outgoing = sum(row.outbound_qty for row in rows)

    companies: "OrderedDict[str, CompanyStock]" = OrderedDict()
    for row in rows:
        entry = companies.setdefault(row.company, CompanyStock(company=row.company, total_stock=0, item_count=0))
        entry.total_stock += row.stock_qty
        entry.item_count += 1

    # Inbound quantities per month, oldest first
    trend = {}
    for event in inbound_events:
        key = event.in_date.strftime("%Y-%m")
        trend[key] = trend.get(key, 0) + (event.quantity or 0)

    return DashboardData(
        month=month,
        total_items=len(rows),
        total_stock=total_stock,
        monthly_incoming=incoming,
        monthly_outgoing=outgoing,
        net_flow=incoming - outgoing,
        outgoing_ratio=round(outgoing / total_stock * 100, 1) if total_stock > 0 else 0.0,
        companies=list(companies.values()),
        monthly_trend=[TrendPoint(month=m, incoming=q) for m, q in sorted(trend.items())],
    )

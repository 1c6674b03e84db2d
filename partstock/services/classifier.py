"""
Shortage / alert classification

Each row is judged on its own; nothing is persisted. Hiding an alert is up
to the client and never touches the inventory data.
"""

from typing import Iterable, List, Optional

from partstock.schemas.alert import Alert
from partstock.schemas.inventory import ViewRow

LOW_STOCK_THRESHOLD = 10
HIGH_DEMAND_RATIO = 0.2

SEVERITY_RANK = {"high": 3, "medium": 2, "low": 1}


def classify(row: ViewRow) -> Optional[Alert]:
    """Alert for one row, or None when the row is healthy"""
    stock = row.stock_qty
    order_qty = row.order_qty

    if stock <= 0:
        return Alert(
            id=f"out_of_stock_{row.id}",
            kind="out_of_stock",
            severity="high",
            title="Out of stock",
            message=f"{row.company} - {row.part_number} is out of stock.",
            item=row,
        )
    if stock <= LOW_STOCK_THRESHOLD:
        return Alert(
            id=f"low_stock_{row.id}",
            kind="low_stock",
            severity="medium",
            title="Low stock",
            message=f"{row.company} - {row.part_number} is down to {stock} units.",
            item=row,
        )
    if order_qty > 0 and stock / order_qty < HIGH_DEMAND_RATIO:
        return Alert(
            id=f"high_demand_{row.id}",
            kind="high_demand",
            severity="medium",
            title="High demand",
            message=f"{row.company} - {row.part_number} is in high demand (stock: {stock}/{order_qty}).",
            item=row,
        )
    return None


def build_alerts(rows: Iterable[ViewRow]) -> List[Alert]:
    """Classify every row, most severe first"""
    alerts = [alert for alert in (classify(row) for row in rows) if alert is not None]
    # sorted() is stable, so rows keep their order within a severity
    return sorted(alerts, key=lambda a: SEVERITY_RANK[a.severity], reverse=True)

"""CSV export of reconciled inventory rows"""

import csv
import io
from typing import Iterable

from partstock.schemas.inventory import ViewRow

CSV_HEADERS = [
    "Company", "Model", "Part number", "Part name",
    "Inbound", "Stock", "Shortage", "Order", "Outbound", "Note",
]


def export_csv(rows: Iterable[ViewRow]) -> str:
    """CSV text with a UTF-8 BOM so spreadsheet tools pick the right encoding"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow([
            row.company, row.model, row.part_number, row.part_name,
            row.inbound_qty, row.stock_qty, row.shortage,
            row.order_qty, row.outbound_qty, row.note,
        ])
    return "\ufeff" + buffer.getvalue()

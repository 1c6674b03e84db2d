"""
Edit history - audit trail of manual inventory edits
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from partstock.db.base import Base

FIELD_LABELS = {
    "inbound_qty": "Inbound",
    "outbound_qty": "Outbound",
    "stock_qty": "Stock",
    "order_qty": "Monthly order",
    "note": "Note",
}


class EditHistory(Base):
    """Audit entry

    changes holds a list of {"field", "old_value", "new_value"} records.
    """
    __tablename__ = "edit_history"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("order_register.id"), nullable=False, index=True)

    actor_name = Column(String(100), nullable=False, comment="Display name of the editor")
    changes = Column(JSON, nullable=False, default=list, comment="Changed fields")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<EditHistory {self.order_id} by {self.actor_name}>"

    @property
    def changed_fields_display(self) -> list:
        """Changed field labels for display"""
        return [FIELD_LABELS.get(c.get("field"), c.get("field")) for c in (self.changes or [])]

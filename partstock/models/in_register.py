"""
Inbound register - append-only log of inbound deliveries
"""

from datetime import datetime
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey
from partstock.db.base import Base


class InRegister(Base):
    """Inbound event (used for trend statistics only)"""
    __tablename__ = "in_register"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("order_register.id"), nullable=False, index=True)
    in_date = Column(Date, nullable=False, index=True, comment="Delivery date")
    quantity = Column(Integer, nullable=False, default=0, comment="Delivered quantity")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<InRegister {self.order_id} {self.in_date} +{self.quantity}>"

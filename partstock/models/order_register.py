"""
Order register - one cumulative row per (company, model, part number)
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from partstock.db.base import Base

class OrderRegister(Base):
    """Cumulative order record

    - (company, model, part_number) is the natural key used for lookups
    - counters start at 0 and are only written by explicit mutations
    """
    __tablename__ = "order_register"

    __table_args__ = (
        UniqueConstraint('company', 'model', 'part_number', name='uq_company_model_part_number'),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Descriptive fields
    company = Column(String(100), nullable=False, index=True, comment="Supplier company")
    model = Column(String(100), nullable=False, comment="Vehicle model (chajong)")
    part_number = Column(String(100), nullable=False, comment="Part number (pumbeon)")
    part_name = Column(String(200), nullable=False, default="", comment="Part name (pm)")
    note = Column(String(500), nullable=False, default="", comment="Remark")

    # Cumulative counters
    inbound_qty_total = Column(Integer, nullable=False, default=0, comment="Total inbound")
    outbound_qty_total = Column(Integer, nullable=False, default=0, comment="Total outbound")
    order_qty_total = Column(Integer, nullable=False, default=0, comment="Total ordered")

    display_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<OrderRegister {self.company}/{self.model}/{self.part_number}>"

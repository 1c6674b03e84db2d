"""
Monthly data - per-month override of the cumulative order figures
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from partstock.db.base import Base

class MonthlyData(Base):
    """Monthly override

    Every column is nullable: a NULL quantity falls back to the cumulative
    value of the order on its own.
    """
    __tablename__ = "monthly_data"

    __table_args__ = (
        UniqueConstraint('year_month', 'order_id', name='uq_year_month_order'),
    )

    id = Column(Integer, primary_key=True, index=True)

    # "YYYY-MM"
    year_month = Column(String(7), nullable=False, index=True, comment="Year and month")
    order_id = Column(Integer, ForeignKey("order_register.id"), nullable=False, index=True)

    inbound_qty = Column(Integer, comment="Inbound this month")
    outbound_qty = Column(Integer, comment="Outbound this month")
    stock_qty = Column(Integer, comment="Stock this month")
    order_qty = Column(Integer, comment="Ordered this month")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<MonthlyData {self.year_month}:{self.order_id}>"

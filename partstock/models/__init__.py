from partstock.models.order_register import OrderRegister
from partstock.models.monthly_data import MonthlyData
from partstock.models.in_register import InRegister
from partstock.models.edit_history import EditHistory

__all__ = [
    "OrderRegister",
    "MonthlyData",
    "InRegister",
    "EditHistory",
]

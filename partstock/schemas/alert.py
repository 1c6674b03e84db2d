"""Alert schemas"""
from typing import List
from pydantic import BaseModel

from partstock.schemas.inventory import ViewRow


class Alert(BaseModel):
    id: str
    kind: str
    severity: str
    title: str
    message: str
    item: ViewRow


class AlertListResponse(BaseModel):
    data: List[Alert]
    total: int
    month: str

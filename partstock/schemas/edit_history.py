"""Edit history schemas"""

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel


class FieldChange(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None


class EditHistoryResponse(BaseModel):
    id: int
    order_id: int
    actor_name: str
    changes: List[FieldChange]
    changed_fields_display: List[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EditHistoryListResponse(BaseModel):
    data: List[EditHistoryResponse]
    total: int
    page: int
    limit: int

"""Bulk import API"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from partstock.core.deps import get_db
from partstock.schemas.import_data import ImportRequest, ImportResult
from partstock.services.mutations import bulk_import

router = APIRouter()


@router.post("/", response_model=ImportResult)
async def import_rows(
    *,
    db: AsyncSession = Depends(get_db),
    import_in: ImportRequest) -> Any:
    """
    Replace one month's data with the given spreadsheet rows

    Rows are loaded one at a time; failures are listed per row.
    """
    return await bulk_import(db, import_in.rows, year_month=import_in.year_month)

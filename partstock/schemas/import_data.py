"""Bulk import schemas"""
from typing import Optional, List, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

class RawImportRow(BaseModel):
    """One spreadsheet row

    Accepts the English keys or the original spreadsheet headers.
    Quantities are kept raw and parsed leniently by the importer.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: Optional[str] = Field(None, validation_alias=AliasChoices("company", "업체명"))
    model: Optional[str] = Field(None, validation_alias=AliasChoices("model", "차종"))
    part_number: Optional[str] = Field(None, validation_alias=AliasChoices("part_number", "품번"))
    part_name: Optional[str] = Field(None, validation_alias=AliasChoices("part_name", "품명"))
    inbound_qty: Optional[Union[int, float, str]] = Field(None, validation_alias=AliasChoices("inbound_qty", "입고수량"))
    outbound_qty: Optional[Union[int, float, str]] = Field(None, validation_alias=AliasChoices("outbound_qty", "반출수량"))
    order_qty: Optional[Union[int, float, str]] = Field(None, validation_alias=AliasChoices("order_qty", "발주수량"))
    note: Optional[str] = Field(None, validation_alias=AliasChoices("note", "비고"))

    @field_validator("company", "model", "part_number", "part_name", "note", mode="before")
    @classmethod
    def stringify(cls, v):
        # Spreadsheet cells holding numbers still count as text here
        if v is None or isinstance(v, str):
            return v
        return str(v)


class ImportRequest(BaseModel):
    rows: List[RawImportRow]
    year_month: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}$", description="Defaults to the current month")


class ImportResult(BaseModel):
    success_count: int = 0
    failed_count: int = 0
    errors: List[str] = []

from datetime import date as date_type, datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from shared.core.schemas import DateRangeQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class RejectLogLineCreate(EmptyStringModel):
    item_id: str
    quantity: float = Field(..., gt=0)
    unit: Optional[str] = None
    reason: Optional[str] = None


class RejectLogLineOut(BaseModel):
    item_id: str
    item_name: str
    sku: str
    base_unit: str
    quantity: float
    unit: str
    ratio: float
    operation: str
    total_base_quantity: float
    reason: Optional[str] = None

    class Config:
        from_attributes = True


class RejectLogCreate(EmptyStringModel):
    date: date_type
    notes: Optional[str] = None
    items: List[RejectLogLineCreate] = []


class RejectLogUpdate(RejectLogCreate):
    pass


class RejectLogOut(BaseModel):
    id: str
    date: date_type
    notes: Optional[str] = None
    user_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    items: List[RejectLogLineOut] = Field(default=[], validation_alias="lines")

    class Config:
        from_attributes = True
        populate_by_name = True


class RejectLogsRequest(DateRangeQueryParams):
    pass


class RejectLogsResponse(BaseModel):
    logs: List[RejectLogOut]
    total: int

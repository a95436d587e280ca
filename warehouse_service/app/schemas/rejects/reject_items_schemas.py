from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.inventory_enum import ConversionOperation


class RejectItemBase(EmptyStringModel):
    sku: str
    name: str
    base_unit: str = "Pcs"
    unit2: Optional[str] = None
    ratio2: Optional[float] = Field(None, gt=0)
    op2: ConversionOperation = ConversionOperation.multiply
    unit3: Optional[str] = None
    ratio3: Optional[float] = Field(None, gt=0)
    op3: ConversionOperation = ConversionOperation.multiply


class RejectItemCreate(RejectItemBase):
    pass


class RejectItemUpdate(EmptyStringModel):
    id: str
    sku: Optional[str] = None
    name: Optional[str] = None
    base_unit: Optional[str] = None
    unit2: Optional[str] = None
    ratio2: Optional[float] = Field(None, gt=0)
    op2: Optional[ConversionOperation] = None
    unit3: Optional[str] = None
    ratio3: Optional[float] = Field(None, gt=0)
    op3: Optional[ConversionOperation] = None


class RejectItemOut(BaseModel):
    id: str
    sku: str
    name: str
    base_unit: str
    unit2: Optional[str] = None
    ratio2: Optional[float] = None
    op2: Optional[str] = None
    unit3: Optional[str] = None
    ratio3: Optional[float] = None
    op3: Optional[str] = None
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class RejectItemsRequest(CommonQueryParams):
    pass


class RejectItemsResponse(BaseModel):
    items: List[RejectItemOut]
    total: int


class RejectItemsBulkRequest(BaseModel):
    items: List[RejectItemCreate]


class RejectItemsBulkResult(BaseModel):
    created: int
    updated: int

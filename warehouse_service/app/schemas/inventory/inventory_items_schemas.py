from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class InventoryItemBase(EmptyStringModel):
    sku: str
    name: str
    category: Optional[str] = None
    location: Optional[str] = None
    unit: str = "Pcs"
    price: float = Field(0, ge=0)
    stock: float = 0
    min_level: float = Field(0, ge=0)
    image_url: Optional[str] = None
    active: bool = True
    conversion_unit: Optional[str] = None
    conversion_ratio: Optional[float] = None

    @model_validator(mode="after")
    def check_conversion(self):
        if self.conversion_unit and (self.conversion_ratio is None or self.conversion_ratio <= 0):
            raise ValueError(
                "conversion_ratio must be greater than zero when conversion_unit is set")
        if self.conversion_unit and self.conversion_unit == self.unit:
            raise ValueError("conversion_unit must differ from the base unit")
        return self


class InventoryItemCreate(InventoryItemBase):
    pass


class InventoryItemUpdate(EmptyStringModel):
    id: str
    sku: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    min_level: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    active: Optional[bool] = None
    conversion_unit: Optional[str] = None
    conversion_ratio: Optional[float] = None


class InventoryItemOut(BaseModel):
    id: str
    sku: str
    name: str
    category: Optional[str] = None
    location: Optional[str] = None
    unit: str
    price: float
    stock: float
    min_level: float
    image_url: Optional[str] = None
    active: bool
    conversion_unit: Optional[str] = None
    conversion_ratio: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InventoryItemsRequest(CommonQueryParams):
    category: Optional[str] = None
    active: Optional[bool] = None


class InventoryItemsResponse(BaseModel):
    items: List[InventoryItemOut]
    total: int


class InventoryItemActiveUpdate(BaseModel):
    active: bool


# Stock is optional on import: rows without it keep the item's current stock
class InventoryImportRow(InventoryItemBase):
    stock: Optional[float] = None


class InventoryImportRequest(BaseModel):
    items: List[InventoryImportRow]


class InventoryImportResult(BaseModel):
    created: int
    updated: int
    ids: List[str]


class ConversionRequest(BaseModel):
    item_id: str
    qty: float = Field(..., gt=0)
    unit: Optional[str] = None


class ConversionOut(BaseModel):
    item_id: str
    base_unit: str
    uom: str
    qty: float
    base_qty: float
    unit_price: float
    total: float

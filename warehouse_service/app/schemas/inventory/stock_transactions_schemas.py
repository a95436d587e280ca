from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from shared.core.schemas import DateRangeQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.inventory_enum import TransactionType


class StockTransactionLineCreate(EmptyStringModel):
    item_id: str
    # quantity in the unit typed by the operator
    qty: float = Field(..., gt=0)
    uom: Optional[str] = None


class StockTransactionLineOut(BaseModel):
    item_id: str
    sku: str
    name: str
    qty: float
    uom: str
    uom_qty: float
    unit_price: float
    total: float

    class Config:
        from_attributes = True


class StockTransactionBase(EmptyStringModel):
    type: TransactionType
    date: Optional[datetime] = None
    notes: Optional[str] = None
    supplier: Optional[str] = None
    po_number: Optional[str] = None
    delivery_note: Optional[str] = None
    documents: Optional[List[str]] = None


class StockTransactionCreate(StockTransactionBase):
    items: List[StockTransactionLineCreate] = []


class StockTransactionUpdate(StockTransactionCreate):
    pass


class StockTransactionOut(BaseModel):
    id: str
    type: TransactionType
    date: datetime
    total_value: float
    user_id: str
    notes: Optional[str] = None
    supplier: Optional[str] = None
    po_number: Optional[str] = None
    delivery_note: Optional[str] = None
    documents: Optional[List[str]] = None
    items: List[StockTransactionLineOut] = Field(default=[], validation_alias="lines")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class StockTransactionsRequest(DateRangeQueryParams):
    # inbound, outbound or all
    type: Optional[str] = None


class StockTransactionsResponse(BaseModel):
    transactions: List[StockTransactionOut]
    total: int

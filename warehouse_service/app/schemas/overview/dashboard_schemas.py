from pydantic import BaseModel
from typing import List


class DashboardStats(BaseModel):
    totalValue: float
    totalUnits: float
    lowStockCount: int
    skuCount: int

    class Config:
        from_attributes = True


class LowStockItem(BaseModel):
    id: str
    sku: str
    name: str
    unit: str
    stock: float
    min_level: float

    class Config:
        from_attributes = True


class CategoryCount(BaseModel):
    name: str
    value: int


class TopOutboundItem(BaseModel):
    sku: str
    name: str
    qty: float


class DashboardOverview(BaseModel):
    stats: DashboardStats
    low_stock_items: List[LowStockItem]
    categories: List[CategoryCount]
    top_outbound: List[TopOutboundItem]

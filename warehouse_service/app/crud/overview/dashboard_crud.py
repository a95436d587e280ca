from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...enum.inventory_enum import TransactionType
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.stock_transactions import StockTransaction, StockTransactionLine
from ...schemas.overview.dashboard_schemas import (
    CategoryCount, DashboardOverview, DashboardStats, LowStockItem, TopOutboundItem,
)


def compute_stats(db: Session) -> DashboardStats:
    total_value, total_units, sku_count = db.query(
        func.coalesce(func.sum(InventoryItem.price * InventoryItem.stock), 0),
        func.coalesce(func.sum(InventoryItem.stock), 0),
        func.count(InventoryItem.id),
    ).one()

    low_stock_count = db.query(func.count(InventoryItem.id))\
        .filter(InventoryItem.stock <= InventoryItem.min_level)\
        .scalar() or 0

    return DashboardStats(
        totalValue=float(total_value),
        totalUnits=float(total_units),
        lowStockCount=low_stock_count,
        skuCount=sku_count or 0
    )


def get_low_stock_items(db: Session) -> List[LowStockItem]:
    """Active items with a reorder threshold set that are at or below it."""
    rows = (
        db.query(InventoryItem)
        .filter(
            InventoryItem.active == True,
            InventoryItem.min_level > 0,
            InventoryItem.stock <= InventoryItem.min_level
        )
        .order_by(InventoryItem.stock - InventoryItem.min_level, InventoryItem.name)
        .all()
    )
    return [LowStockItem.model_validate(r) for r in rows]


def get_category_breakdown(db: Session) -> List[CategoryCount]:
    rows = (
        db.query(
            func.coalesce(InventoryItem.category, "Uncategorized").label("name"),
            func.count(InventoryItem.id).label("value")
        )
        .group_by(func.coalesce(InventoryItem.category, "Uncategorized"))
        .order_by(func.count(InventoryItem.id).desc())
        .all()
    )
    return [CategoryCount(name=r.name, value=r.value) for r in rows]


def get_top_outbound(db: Session, limit: int = 5) -> List[TopOutboundItem]:
    """Most issued SKUs by total base quantity across outbound history."""
    qty = func.sum(StockTransactionLine.qty).label("qty")
    rows = (
        db.query(
            StockTransactionLine.sku,
            func.max(StockTransactionLine.name).label("name"),
            qty
        )
        .join(StockTransaction, StockTransaction.id == StockTransactionLine.transaction_id)
        .filter(StockTransaction.type == TransactionType.outbound.value)
        .group_by(StockTransactionLine.sku)
        .order_by(qty.desc())
        .limit(limit)
        .all()
    )
    return [TopOutboundItem(sku=r.sku, name=r.name, qty=float(r.qty)) for r in rows]


def get_overview_data(db: Session, top_limit: int = 5) -> DashboardOverview:
    return DashboardOverview(
        stats=compute_stats(db),
        low_stock_items=get_low_stock_items(db),
        categories=get_category_breakdown(db),
        top_outbound=get_top_outbound(db, top_limit)
    )

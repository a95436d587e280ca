from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_warehouse_db as get_db
from ...crud.overview import dashboard_crud
from ...schemas.overview.dashboard_schemas import (
    CategoryCount, DashboardOverview, DashboardStats, LowStockItem, TopOutboundItem,
)

router = APIRouter(prefix="/api/dashboard",
                   tags=["Dashboard"], dependencies=[Depends(validate_current_token)])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return dashboard_crud.compute_stats(db)


@router.get("/overview", response_model=DashboardOverview)
def get_overview(top: int = Query(5, ge=1, le=50), db: Session = Depends(get_db)):
    return dashboard_crud.get_overview_data(db, top)


@router.get("/low-stock", response_model=List[LowStockItem])
def low_stock(db: Session = Depends(get_db)):
    return dashboard_crud.get_low_stock_items(db)


@router.get("/categories", response_model=List[CategoryCount])
def categories(db: Session = Depends(get_db)):
    return dashboard_crud.get_category_breakdown(db)


@router.get("/top-outbound", response_model=List[TopOutboundItem])
def top_outbound(limit: int = Query(5, ge=1, le=50), db: Session = Depends(get_db)):
    return dashboard_crud.get_top_outbound(db, limit)

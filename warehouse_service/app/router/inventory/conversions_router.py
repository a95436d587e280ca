from decimal import Decimal
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_warehouse_db as get_db
from ...crud.inventory import inventory_items_crud
from ...schemas.inventory.inventory_items_schemas import ConversionOut, ConversionRequest
from ...services.uom_conversion import available_units, conversion_for_item, resolve_conversion

router = APIRouter(prefix="/api/conversions",
                   tags=["conversions"], dependencies=[Depends(validate_current_token)])


@router.post("/resolve", response_model=ConversionOut)
def resolve(request: ConversionRequest, db: Session = Depends(get_db)):
    item = inventory_items_crud.get_item_or_404(db, request.item_id)
    result = resolve_conversion(
        item.unit, item.price, conversion_for_item(item), request.qty, request.unit)

    return ConversionOut(
        item_id=item.id,
        base_unit=item.unit,
        uom=result.uom,
        qty=request.qty,
        base_qty=float(result.base_qty),
        unit_price=float(result.unit_price),
        total=float(Decimal(str(request.qty)) * result.unit_price)
    )


@router.get("/units/{item_id}", response_model=List[str])
def units(item_id: str, db: Session = Depends(get_db)):
    item = inventory_items_crud.get_item_or_404(db, item_id)
    return available_units(item.unit, conversion_for_item(item))

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_warehouse_db as get_db
from shared.core.exceptions import NotFoundError
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import inventory_items_crud as crud
from ...schemas.inventory.inventory_items_schemas import (
    InventoryImportRequest, InventoryImportResult, InventoryItemActiveUpdate,
    InventoryItemCreate, InventoryItemOut, InventoryItemsRequest,
    InventoryItemsResponse, InventoryItemUpdate,
)

router = APIRouter(prefix="/api/inventory-items",
                   tags=["inventory_items"], dependencies=[Depends(validate_current_token)])


@router.get("/", response_model=InventoryItemsResponse)
def read_items(params: InventoryItemsRequest = Depends(), db: Session = Depends(get_db)):
    return crud.get_inventory_items(db, params)


@router.get("/categories", response_model=List[Lookup])
def read_categories(db: Session = Depends(get_db)):
    return crud.get_categories(db)


@router.get("/{item_id}", response_model=InventoryItemOut)
def read_item(item_id: str, db: Session = Depends(get_db)):
    return crud.get_item_or_404(db, item_id)


@router.post("/", response_model=None, dependencies=[Depends(allow_admin)])
def create_item(item: InventoryItemCreate, db: Session = Depends(get_db)):
    result = crud.create_item(db, item)
    return success_response(
        data=InventoryItemOut.model_validate(result),
        message="Item created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", response_model=None, dependencies=[Depends(allow_admin)])
def update_item(item: InventoryItemUpdate, db: Session = Depends(get_db)):
    result = crud.update_item(db, item)
    return success_response(
        data=InventoryItemOut.model_validate(result),
        message="Item updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.patch("/{item_id}/active", response_model=None, dependencies=[Depends(allow_admin)])
def update_item_active(item_id: str, request: InventoryItemActiveUpdate, db: Session = Depends(get_db)):
    result = crud.set_item_active(db, item_id, request.active)
    return success_response(
        data=InventoryItemOut.model_validate(result),
        message="Item activated" if result.active else "Item deactivated",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/import", response_model=None, dependencies=[Depends(allow_admin)])
def import_items(request: InventoryImportRequest, db: Session = Depends(get_db)):
    result: InventoryImportResult = crud.bulk_import_items(db, request.items)
    return success_response(
        data=result,
        message=f"Imported {result.created + result.updated} item(s)",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.delete("/{item_id}", response_model=None, dependencies=[Depends(allow_admin)])
def delete_item(item_id: str, db: Session = Depends(get_db)):
    if not crud.delete_item(db, item_id):
        raise NotFoundError("Item not found", "delete_item", item_id)
    return success_response(
        data={"id": item_id},
        message="Item deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )

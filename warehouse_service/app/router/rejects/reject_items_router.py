from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, validate_current_token
from shared.core.database import get_warehouse_db as get_db
from shared.core.exceptions import NotFoundError
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.rejects import reject_items_crud as crud
from ...schemas.rejects.reject_items_schemas import (
    RejectItemCreate, RejectItemOut, RejectItemsBulkRequest, RejectItemsRequest,
    RejectItemsResponse, RejectItemUpdate,
)

router = APIRouter(prefix="/api/reject-items",
                   tags=["reject_items"], dependencies=[Depends(validate_current_token)])


@router.get("/", response_model=RejectItemsResponse)
def read_reject_items(params: RejectItemsRequest = Depends(), db: Session = Depends(get_db)):
    return crud.get_reject_items(db, params)


@router.get("/{item_id}", response_model=RejectItemOut)
def read_reject_item(item_id: str, db: Session = Depends(get_db)):
    return crud.get_reject_item_or_404(db, item_id)


@router.post("/", response_model=None, dependencies=[Depends(allow_admin)])
def create_reject_item(item: RejectItemCreate, db: Session = Depends(get_db)):
    result = crud.create_reject_item(db, item)
    return success_response(
        data=RejectItemOut.model_validate(result),
        message="Reject item created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", response_model=None, dependencies=[Depends(allow_admin)])
def update_reject_item(item: RejectItemUpdate, db: Session = Depends(get_db)):
    result = crud.update_reject_item(db, item)
    return success_response(
        data=RejectItemOut.model_validate(result),
        message="Reject item updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/bulk", response_model=None, dependencies=[Depends(allow_admin)])
def bulk_upsert(request: RejectItemsBulkRequest, db: Session = Depends(get_db)):
    result = crud.bulk_upsert_reject_items(db, request.items)
    return success_response(
        data=result,
        message="Reject items saved successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.delete("/{item_id}", response_model=None, dependencies=[Depends(allow_admin)])
def delete_reject_item(item_id: str, db: Session = Depends(get_db)):
    if not crud.delete_reject_item(db, item_id):
        raise NotFoundError("Reject item not found", "delete_reject_item", item_id)
    return success_response(
        data={"id": item_id},
        message="Reject item deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )

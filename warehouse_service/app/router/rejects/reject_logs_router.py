from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_warehouse_db as get_db
from shared.core.exceptions import NotFoundError
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.rejects import reject_logs_crud as crud
from ...schemas.rejects.reject_logs_schemas import (
    RejectLogCreate, RejectLogOut, RejectLogsRequest, RejectLogsResponse, RejectLogUpdate,
)

router = APIRouter(prefix="/api/reject-logs",
                   tags=["reject_logs"], dependencies=[Depends(validate_current_token)])


@router.get("/", response_model=RejectLogsResponse)
def read_reject_logs(params: RejectLogsRequest = Depends(), db: Session = Depends(get_db)):
    return crud.list_reject_logs(db, params)


@router.get("/{log_id}", response_model=RejectLogOut)
def read_reject_log(log_id: str, db: Session = Depends(get_db)):
    return crud.get_reject_log_or_404(db, log_id)


@router.post("/", response_model=None)
def create_reject_log(
    payload: RejectLogCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    result = crud.create_reject_log(db, payload, current_user)
    return success_response(
        data=RejectLogOut.model_validate(result),
        message="Reject log saved successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{log_id}", response_model=None, dependencies=[Depends(allow_staff)])
def update_reject_log(log_id: str, payload: RejectLogUpdate, db: Session = Depends(get_db)):
    result = crud.update_reject_log(db, log_id, payload)
    return success_response(
        data=RejectLogOut.model_validate(result),
        message="Reject log updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{log_id}", response_model=None, dependencies=[Depends(allow_staff)])
def delete_reject_log(log_id: str, db: Session = Depends(get_db)):
    if not crud.delete_reject_log(db, log_id):
        raise NotFoundError("Reject log not found", "delete_reject_log", log_id)
    return success_response(
        data={"id": log_id},
        message="Reject log deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )

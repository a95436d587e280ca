from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin
from shared.core.database import get_warehouse_db as get_db
from shared.core.exceptions import NotFoundError
from shared.core.schemas import CommonQueryParams, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.access_control import user_management_crud as crud
from ...schemas.access_control.user_management_schemas import (
    UserCreate, UserOut, UsersResponse, UserUpdate,
)

router = APIRouter(prefix="/api/users", tags=["User Management"],
                   dependencies=[Depends(allow_admin)])


@router.get("/", response_model=UsersResponse)
def read_users(params: CommonQueryParams = Depends(), db: Session = Depends(get_db)):
    return crud.get_users(db, params.skip, params.limit)


@router.get("/{user_id}", response_model=UserOut)
def read_user(user_id: str, db: Session = Depends(get_db)):
    return crud.get_user_or_404(db, user_id)


@router.post("/", response_model=None)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    result = crud.create_user(db, user)
    return success_response(
        data=UserOut.model_validate(result),
        message="User created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", response_model=None)
def update_user(user: UserUpdate, db: Session = Depends(get_db)):
    result = crud.update_user(db, user)
    return success_response(
        data=UserOut.model_validate(result),
        message="User updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{user_id}", response_model=None)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    if not crud.delete_user(db, user_id, current_user.user_id):
        raise NotFoundError("User not found", "delete_user", user_id)
    return success_response(
        data={"id": user_id},
        message="User deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )

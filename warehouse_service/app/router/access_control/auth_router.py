from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from ...crud.access_control import user_management_crud as crud
from ...schemas.access_control.user_management_schemas import (
    LoginRequest, LoginResponse, UserOut,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    return crud.login(db, request)


@router.get("/me", response_model=UserOut)
def me(db: Session = Depends(get_db), current_user: UserToken = Depends(validate_current_token)):
    return crud.get_user_or_404(db, current_user.user_id)

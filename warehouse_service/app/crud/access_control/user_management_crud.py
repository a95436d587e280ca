import logging
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fastapi import status

from shared.core.auth import create_access_token
from shared.core.exceptions import NotFoundError, PersistenceError, ValidationError
from shared.helpers.json_response_helper import error_response
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ...schemas.access_control.user_management_schemas import (
    LoginRequest, LoginResponse, UserCreate, UserOut, UserUpdate, UsersResponse,
)

logger = logging.getLogger(__name__)


def _commit(db: Session, operation: str, user_id: Optional[str] = None):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Could not save user", operation, user_id) from e


def login(db: Session, request: LoginRequest) -> LoginResponse:
    user = db.query(Users).filter(Users.username == request.username.strip()).first()

    if not user or not user.verify_password(request.password):
        logger.info("Failed login for %s", request.username)
        return error_response(
            message="Invalid username or password",
            status_code=AppStatusCode.AUTHENTICATION_INVALID_CREDENTIALS,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if not user.active:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=status.HTTP_403_FORBIDDEN
        )

    return LoginResponse(
        access_token=create_access_token(user),
        user=UserOut.model_validate(user)
    )


def get_users(db: Session, skip: int = 0, limit: int = 100) -> UsersResponse:
    total = db.query(func.count(Users.id)).scalar()
    users = db.query(Users).order_by(Users.username).offset(skip).limit(limit).all()
    return UsersResponse(users=[UserOut.model_validate(u) for u in users], total=total or 0)


def get_user_or_404(db: Session, user_id: str) -> Users:
    user = db.query(Users).filter(Users.id == user_id).first()
    if not user:
        raise NotFoundError("User not found", "get_user", user_id)
    return user


def create_user(db: Session, request: UserCreate) -> Users:
    username = request.username.strip()
    if db.query(Users).filter(Users.username == username).first():
        raise ValidationError(
            f"Username '{username}' is already taken", "create_user")

    user = Users(username=username, name=request.name, role=request.role.value)
    user.set_password(request.password)
    db.add(user)
    _commit(db, "create_user")
    db.refresh(user)
    logger.info("Created user %s with role %s", user.username, user.role)
    return user


def update_user(db: Session, request: UserUpdate) -> Users:
    user = get_user_or_404(db, request.id)

    changes = request.model_dump(exclude_unset=True, exclude={"id", "password"})
    for k, v in changes.items():
        setattr(user, k, getattr(v, "value", v))

    if request.password:
        user.set_password(request.password)

    _commit(db, "update_user", user.id)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str, current_user_id: str) -> bool:
    if user_id == current_user_id:
        raise ValidationError("You cannot delete your own account",
                              "delete_user", user_id)

    user = db.query(Users).filter(Users.id == user_id).first()
    if not user:
        return False
    db.delete(user)
    _commit(db, "delete_user", user_id)
    return True

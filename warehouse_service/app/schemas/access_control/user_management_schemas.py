from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from ...enum.access_control_enum import UserRole


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: UserRole = UserRole.staff
    password: str = Field(..., min_length=4)


class UserUpdate(BaseModel):
    id: str
    name: Optional[str] = None
    role: Optional[UserRole] = None
    active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=4)


class UserOut(BaseModel):
    id: str
    username: str
    name: str
    role: str
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class UsersResponse(BaseModel):
    users: List[UserOut]
    total: int

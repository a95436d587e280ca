from datetime import date
from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar, Union

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    username: str
    name: Optional[str] = None
    role: str
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = 100


class DateRangeQueryParams(CommonQueryParams):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class Lookup(BaseModel):
    id: Union[str, int]
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


class MessageOut(BaseModel):
    message: str
    data: Optional[Any] = None

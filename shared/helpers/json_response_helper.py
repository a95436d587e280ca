from fastapi import HTTPException
from typing import Any

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult

SUCCESS = "Success"
FAILURE = "Failure"


def failure_body(message: str, status_code: str = AppStatusCode.OPERATION_FAILED) -> dict:
    """Envelope dict for an error response, shared by routes and exception handlers."""
    return JsonOutResult(
        data=None,
        status=FAILURE,
        status_code=status_code,
        message=message
    ).model_dump()


def is_envelope(body: Any) -> bool:
    return isinstance(body, dict) and {"status", "status_code", "message"}.issubset(body.keys())


def success_response(data: Any = None, message: str = "Success",
                     status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=data,
        status=SUCCESS,
        status_code=status_code,
        message=message
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail=failure_body(message, status_code)
    )

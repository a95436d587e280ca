import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from shared.core.exceptions import WarehouseError
from shared.helpers.json_response_helper import failure_body, is_envelope
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(WarehouseError)
    async def warehouse_exception_handler(request: Request, exc: WarehouseError):
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method,
                         request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method,
                        request.url.path, exc)

        return JSONResponse(
            content=failure_body(exc.message, exc.status_code),
            status_code=exc.http_status
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already builds the envelope
        if is_envelope(exc.detail):
            return JSONResponse(content=exc.detail, status_code=exc.status_code, headers=exc.headers)

        return JSONResponse(
            content=failure_body(str(exc.detail), str(exc.status_code)),
            status_code=exc.status_code,
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=failure_body(_validation_message(exc), AppStatusCode.REQUIRED_VALIDATION_ERROR),
            status_code=422
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        return JSONResponse(
            content=failure_body("Internal server error"),
            status_code=500
        )

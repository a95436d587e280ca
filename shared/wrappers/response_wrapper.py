import json
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
from fastapi.responses import JSONResponse
from shared.core.schemas import JsonOutResult
from shared.helpers.json_response_helper import is_envelope

logger = logging.getLogger(__name__)

SKIPPED_PATHS = ("/openapi", "/docs", "/redoc")


def _passthrough_headers(response):
    return {k: v for k, v in response.headers.items() if k.lower() != "content-length"}


class JsonResponseMiddleware(BaseHTTPMiddleware):
    """Wraps successful JSON bodies in the JsonOutResult envelope.

    Error bodies are already enveloped by the exception handlers, so
    anything outside 2xx/3xx is passed through untouched.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path.startswith(SKIPPED_PATHS):
            return await call_next(request)

        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if not (200 <= response.status_code < 400) or "application/json" not in content_type:
            return response

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            data = json.loads(body_bytes.decode("utf-8"))
        except ValueError:
            logger.warning("Non-JSON body on %s with JSON content type",
                           request.url.path)
            return JSONResponse(content=None, status_code=response.status_code)

        # Skip if already wrapped
        if is_envelope(data):
            return JSONResponse(
                content=data,
                status_code=response.status_code,
                headers=_passthrough_headers(response),
            )

        wrapped = JsonOutResult(
            data=data,
            status="Success",
            status_code=str(response.status_code),
            message="Data retrieved successfully"
        ).model_dump()

        return JSONResponse(
            content=wrapped,
            status_code=response.status_code,
            headers=_passthrough_headers(response),
        )

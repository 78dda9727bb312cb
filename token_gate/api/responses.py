from __future__ import annotations

from fastapi import Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.status import StatusResponse
from ..logging_conf import get_logger

__all__ = [
    "ALLOW_ORIGIN",
    "http_error_response",
    "PREFLIGHT_HEADERS",
    "preflight_response",
    "write_status_response",
]

logger = get_logger("api.responses")

ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def preflight_response() -> Response:
    """Bare 200 with the CORS permission headers and no body."""
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


def write_status_response(request: Request, status_code: int, payload: StatusResponse) -> Response:
    """Serialize `payload` as JSON with the given status code.

    OPTIONS requests short-circuit to the pre-flight answer, ignoring both
    `status_code` and `payload`. If the payload cannot be serialized the error
    is logged and the client still gets `status_code`, just with an empty body.
    """
    if request.method == "OPTIONS":
        return preflight_response()

    try:
        return JSONResponse(
            status_code=status_code,
            content=payload.model_dump(mode="json"),
            headers=ALLOW_ORIGIN,
        )
    except (TypeError, ValueError):
        logger.exception(
            "response.encode_error",
            extra={
                "event": "response_encode_error",
                "path": request.url.path,
                "status_code": status_code,
            },
        )
        return Response(
            status_code=status_code,
            media_type="application/json",
            headers=ALLOW_ORIGIN,
        )


async def http_error_response(request: Request, exc: StarletteHTTPException) -> Response:
    """Framework errors (404, 405) in FastAPI's usual shape plus the CORS origin header."""
    response = await http_exception_handler(request, exc)
    response.headers.update(ALLOW_ORIGIN)
    return response

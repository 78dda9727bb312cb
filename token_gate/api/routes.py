from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response, status

from ..config import Settings
from ..domain.auth import is_authorized
from ..domain.status import OK, SECURED, UNAUTHORIZED
from ..logging_conf import get_logger
from .responses import write_status_response

__all__ = ["ROUTE_METHODS", "health", "make_secure_handler", "build_router"]

logger = get_logger("api")

# GET for the payload, OPTIONS for browser pre-flight.
ROUTE_METHODS = ["GET", "OPTIONS"]

Handler = Callable[[Request], Awaitable[Response]]


async def health(request: Request) -> Response:
    """Liveness check; consults nothing."""
    return write_status_response(request, status.HTTP_200_OK, OK)


def make_secure_handler(auth_token: str) -> Handler:
    """Return the /secure handler bound to `auth_token`.

    The token is captured here once; requests never look at the environment.
    """
    if not auth_token:
        raise ValueError("auth_token must be a non-empty string")

    async def secure(request: Request) -> Response:
        if request.method != "OPTIONS" and not is_authorized(
            request.headers.get("Authorization"), auth_token
        ):
            logger.info(
                "secure.denied",
                extra={
                    "event": "secure_denied",
                    "has_header": "authorization" in request.headers,
                },
            )
            return write_status_response(request, status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED)
        return write_status_response(request, status.HTTP_200_OK, SECURED)

    return secure


def build_router(settings: Settings) -> APIRouter:
    """Register /health and /secure; the secure handler gets the configured token."""
    router = APIRouter()
    router.add_api_route(
        "/health",
        health,
        methods=ROUTE_METHODS,
        summary="Liveness check",
        response_model=None,
    )
    router.add_api_route(
        "/secure",
        make_secure_handler(settings.auth_token),
        methods=ROUTE_METHODS,
        summary="Token-gated status",
        response_model=None,
    )
    return router

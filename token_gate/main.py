"""FastAPI app factory and the process entry point.

Run with `token-gate`, or under uvicorn directly:
`uvicorn token_gate.main:create_app --factory --port 8888`.
"""
from __future__ import annotations

import argparse
import time
from collections.abc import Callable
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import build_router
from .api.responses import http_error_response
from .config import ConfigError, Settings, load_env_overrides
from .logging_conf import get_logger, resolve_level, setup_logging

logger = get_logger("token_gate")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Without explicit settings they are read from the environment, so a missing
    AUTH_TOKEN fails here, before anything can bind a port.
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="token-gate", version=__version__)

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Log start/end of each request and echo or mint X-Request-ID."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": request_id,
                },
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    app.add_exception_handler(StarletteHTTPException, http_error_response)
    app.include_router(build_router(settings))
    return app


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve /health and the token-gated /secure")
    parser.add_argument(
        "--env-file",
        default=None,
        help="dotenv file to seed the environment from (default: $ENV_FILE or .env)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Load configuration and serve until interrupted.

    Configuration and bind errors are logged and exit with status 1.
    """
    args = parse_args(argv)
    setup_logging()

    try:
        load_env_overrides(args.env_file)
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error("startup.failed", extra={"event": "startup_failed", "code": e.code, "error": str(e)})
        raise SystemExit(1) from e

    # LOG_LEVEL may have come from the settings file just loaded
    setup_logging(settings.log_level)
    app = create_app(settings)

    logger.info(
        "startup",
        extra={"event": "startup", "host": settings.host, "port": settings.port},
    )
    try:
        # log_config=None keeps uvicorn on the JSON handler installed above
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_config=None,
            log_level=resolve_level(settings.log_level),
        )
    except OSError as e:
        logger.exception("listen.failed", extra={"event": "listen_failed", "port": settings.port})
        raise SystemExit(1) from e
    logger.info("shutdown", extra={"event": "shutdown"})


if __name__ == "__main__":
    main()

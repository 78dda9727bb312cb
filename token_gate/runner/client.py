from __future__ import annotations

import asyncio
import time

import httpx

from ..api.responses import PREFLIGHT_HEADERS
from ..logging_conf import get_logger
from .types import CheckResult, SmokeError

logger = get_logger("runner.client")

# Appended to the configured token to build a value that must be rejected.
_WRONG_SUFFIX = "-wrong"


async def wait_for_health(
    client: httpx.AsyncClient, timeout_s: float = 20.0, poll_interval_s: float = 0.25
) -> None:
    """Ping /health until it reports ok, or raise SmokeError after `timeout_s`."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        try:
            r = await client.get("/health")
            if r.status_code == 200 and r.json().get("status") == "ok":
                logger.info("health.ok", extra={"event": "health_ok"})
                return
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("health.retry", extra={"event": "health_retry", "error": str(e)})
        await asyncio.sleep(poll_interval_s)
    raise SmokeError("Health check did not pass within timeout")


async def check_status(
    client: httpx.AsyncClient,
    name: str,
    path: str,
    *,
    expected_status: int,
    expected_body: dict,
    headers: dict[str, str | bytes] | None = None,
) -> CheckResult:
    """GET `path` and compare status code, JSON body and the CORS origin header."""
    try:
        r = await client.get(path, headers=headers)
        body = r.json()
    except (httpx.HTTPError, ValueError) as e:
        return CheckResult(name, False, f"request failed: {e}")

    problems = []
    if r.status_code != expected_status:
        problems.append(f"status {r.status_code} != {expected_status}")
    if body != expected_body:
        problems.append(f"body {body} != {expected_body}")
    if r.headers.get("Access-Control-Allow-Origin") != "*":
        problems.append("missing Access-Control-Allow-Origin")
    return CheckResult(name, not problems, "; ".join(problems))


async def check_preflight(client: httpx.AsyncClient, path: str) -> CheckResult:
    """OPTIONS `path` and expect a bare 200 carrying every pre-flight header."""
    name = f"preflight{path.replace('/', '_')}"
    try:
        r = await client.options(path)
    except httpx.HTTPError as e:
        return CheckResult(name, False, f"request failed: {e}")

    problems = []
    if r.status_code != 200:
        problems.append(f"status {r.status_code} != 200")
    if r.content:
        problems.append("body not empty")
    for key, value in PREFLIGHT_HEADERS.items():
        if r.headers.get(key) != value:
            problems.append(f"{key}={r.headers.get(key)!r}")
    return CheckResult(name, not problems, "; ".join(problems))


async def run_checks(client: httpx.AsyncClient, token: str | None) -> list[CheckResult]:
    """Exercise both endpoints; authorized checks need the configured token.

    Tokens are sent as UTF-8 bytes since httpx only encodes str headers as ASCII.
    """
    results = [
        await check_status(
            client, "health", "/health", expected_status=200, expected_body={"status": "ok"}
        ),
        await check_status(
            client,
            "secure_no_header",
            "/secure",
            expected_status=401,
            expected_body={"status": "unauthorized"},
        ),
        await check_status(
            client,
            "secure_wrong_token",
            "/secure",
            expected_status=401,
            expected_body={"status": "unauthorized"},
            headers={"Authorization": f"{token or ''}{_WRONG_SUFFIX}".encode()},
        ),
    ]

    if token:
        results.append(
            await check_status(
                client,
                "secure_authorized",
                "/secure",
                expected_status=200,
                expected_body={"status": "secured"},
                headers={"Authorization": token.encode()},
            )
        )
    else:
        results.append(CheckResult("secure_authorized", False, "no token configured"))

    for path in ("/health", "/secure"):
        results.append(await check_preflight(client, path))

    for res in results:
        if not res.passed:
            logger.warning(
                "check.failed",
                extra={"event": "check_failed", "check": res.name, "detail": res.detail},
            )
    return results

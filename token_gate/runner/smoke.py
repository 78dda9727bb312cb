#!/usr/bin/env python3
"""Smoke runner for a live token-gate server.

Steps:
- wait for /health
- check health, secure (authorized, wrong token, no header) and pre-flight
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from ..logging_conf import get_logger, setup_logging
from .cli import parse_args
from .client import run_checks, wait_for_health
from .types import SmokeError
from .utils import summarize

logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    token: str | None,
    timeout_s: float = 20.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        await wait_for_health(client, timeout_s=timeout_s)
        results = await run_checks(client, token)
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        code = asyncio.run(
            run_smoke(base_url=args.base_url, token=args.token, timeout_s=args.timeout)
        )
    except SmokeError as e:
        logger.error("runner.aborted", extra={"event": "runner_aborted", "error": str(e)})
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()

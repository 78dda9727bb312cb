from __future__ import annotations

from .types import CheckResult


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute a summary dict and an exit code (0 only if every check passed)."""
    failed = [r for r in results if not r.passed]
    summary = {
        "component": "runner",
        "event": "summary",
        "checks": len(results),
        "passed": len(results) - len(failed),
        "failed": len(failed),
        "failures": [{"check": r.name, "detail": r.detail} for r in failed],
    }
    exit_code = 0 if (results and not failed) else 1
    return summary, exit_code

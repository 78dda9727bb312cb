#!/usr/bin/env python3
"""Write a local dotenv file with a freshly generated AUTH_TOKEN."""
from __future__ import annotations

import argparse
import secrets
from pathlib import Path

from .config import DEFAULT_ENV_FILE

TOKEN_BYTES = 32


def render_env(token: str) -> str:
    return (
        "# Local settings for token-gate; exported variables take precedence.\n"
        f"AUTH_TOKEN={token}\n"
        "LOG_LEVEL=INFO\n"
    )


def write_env(path: Path, *, force: bool = False) -> str:
    """Create `path` and return the token written into it.

    Raises FileExistsError rather than clobbering an existing file unless `force`.
    """
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists (use --force to overwrite)")
    token = secrets.token_urlsafe(TOKEN_BYTES)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_env(token), encoding="utf-8")
    return token


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--path", default=DEFAULT_ENV_FILE, help="defaults to .env in the working directory")
    parser.add_argument("--force", action="store_true")
    args = parser.parse_args(argv)
    try:
        write_env(Path(args.path), force=args.force)
    except FileExistsError as e:
        raise SystemExit(str(e)) from e
    print(f"Wrote {args.path}")


if __name__ == "__main__":
    main()

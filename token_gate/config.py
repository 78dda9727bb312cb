"""Process configuration: optional dotenv overrides and the validated settings.

The settings file only seeds the environment; values already exported by the
caller always take precedence over it.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

from .logging_conf import get_logger

__all__ = [
    "PORT",
    "DEFAULT_HOST",
    "DEFAULT_ENV_FILE",
    "ConfigError",
    "SettingsFileError",
    "MissingAuthTokenError",
    "Settings",
    "is_local",
    "load_env_overrides",
]

PORT = 8888
DEFAULT_HOST = "0.0.0.0"
DEFAULT_ENV_FILE = ".env"
_TRUTHY = {"1", "true", "t", "yes", "y", "on"}

logger = get_logger("config")


# ------------------------
# Errors
# ------------------------
class ConfigError(RuntimeError):
    """Startup cannot proceed; `code` is a stable machine-readable reason."""

    code: str = "invalid_config"


class SettingsFileError(ConfigError):
    code = "settings_file_unreadable"


class MissingAuthTokenError(ConfigError):
    code = "missing_auth_token"


# ------------------------
# Settings file
# ------------------------

def is_local(environ: Mapping[str, str] | None = None) -> bool:
    """True when IS_LOCAL says the environment is already prepared by the caller."""
    env = os.environ if environ is None else environ
    return env.get("IS_LOCAL", "").strip().lower() in _TRUTHY


def load_env_overrides(path: str | os.PathLike[str] | None = None) -> bool:
    """Seed os.environ from a dotenv file if one exists.

    Returns True if a file was read. A missing file is a no-op; a file that
    exists but cannot be read or decoded raises SettingsFileError.
    """
    if is_local():
        logger.debug("env.skip_local", extra={"event": "env_skip_local"})
        return False

    env_path = Path(path if path is not None else os.getenv("ENV_FILE", DEFAULT_ENV_FILE))
    if not env_path.is_file():
        logger.debug("env.absent", extra={"event": "env_absent", "path": str(env_path)})
        return False

    try:
        values = dotenv_values(env_path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SettingsFileError(f"cannot read settings file {env_path}: {e}") from e

    applied = 0
    for key, value in values.items():
        # Bare keys without "=" parse to None; there is nothing to export.
        if value is None or key in os.environ:
            continue
        os.environ[key] = value
        applied += 1

    logger.info(
        "env.loaded",
        extra={"event": "env_loaded", "path": str(env_path), "applied": applied},
    )
    return True


# ------------------------
# Settings
# ------------------------
class Settings(BaseModel):
    """Everything the server needs, read once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    auth_token: str = Field(..., min_length=1, repr=False)
    host: str = DEFAULT_HOST
    port: int = PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment.

        Raises MissingAuthTokenError if AUTH_TOKEN is unset or empty.
        """
        env = os.environ if environ is None else environ
        token = env.get("AUTH_TOKEN")
        if not token:
            raise MissingAuthTokenError("AUTH_TOKEN env variable not found")
        return cls(
            auth_token=token,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

__all__ = ["Status", "StatusResponse", "OK", "SECURED", "UNAUTHORIZED"]


class Status(str, Enum):
    ok = "ok"
    secured = "secured"
    unauthorized = "unauthorized"


class StatusResponse(BaseModel):
    """The only body the service returns: ``{"status": "<value>"}``."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    status: Status


OK = StatusResponse(status=Status.ok)
SECURED = StatusResponse(status=Status.secured)
UNAUTHORIZED = StatusResponse(status=Status.unauthorized)

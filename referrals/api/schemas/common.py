# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so error and acknowledgement payloads stay consistent.
# These classes are also used by tests to validate response shape stability.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime


class MessageResponse(BaseModel):
    message: str

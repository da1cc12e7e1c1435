# This file defines response schemas for the unauthenticated operational endpoints.
# Readiness reports each table the referral routes read from, so a half-migrated
# database shows up as not ready instead of failing on the first request.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class OperationalFields(BaseModel):
    request_id: str
    schema_version: str
    timestamp: datetime


class HealthResponse(OperationalFields):
    status: str
    environment: str
    service_name: str


class ReadinessResponse(OperationalFields):
    ready: bool
    db_connected: bool
    referral_source_ready: bool
    user_source_ready: bool


class VersionResponse(OperationalFields):
    service_name: str
    app_version: str

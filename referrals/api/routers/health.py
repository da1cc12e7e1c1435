# This file defines liveness, readiness, and version endpoints.
# These routes stay outside bearer-token authentication so orchestrators can poll them.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from referrals.api.api_config import ApiConfig
from referrals.api.db_access import DatabaseClient
from referrals.api.dependencies import get_config, get_database_client
from referrals.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def _operational_fields(request: Request, config: ApiConfig) -> dict[str, object]:
    return {
        "request_id": request.state.request_id,
        "schema_version": config.schema_version,
        "timestamp": datetime.now(tz=UTC),
    }


@router.get("/health", response_model=HealthResponse)
def health(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        **_operational_fields(request, config),
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(request: Request, config: ConfigDep, db: DBDep) -> dict[str, object]:
    db_connected = db.can_connect()
    referral_source_ready = db_connected and db.table_exists(config.referral_table_name)
    user_source_ready = db_connected and db.table_exists(config.user_table_name)

    return {
        **_operational_fields(request, config),
        "ready": referral_source_ready and user_source_ready,
        "db_connected": db_connected,
        "referral_source_ready": referral_source_ready,
        "user_source_ready": user_source_ready,
    }


@router.get("/version", response_model=VersionResponse)
def version(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        **_operational_fields(request, config),
        "service_name": config.api_name,
        "app_version": config.app_version,
    }

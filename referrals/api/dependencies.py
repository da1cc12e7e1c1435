# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client and referral service are created once and shared.
# The setup keeps routers thin and makes endpoint tests easy to override.
# Centralized construction also ensures one consistent API configuration is used.

from __future__ import annotations

from functools import lru_cache

from referrals.api.api_config import ApiConfig, get_api_config
from referrals.api.db_access import DatabaseClient
from referrals.api.services.referral_service import ReferralService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_referral_service() -> ReferralService:
    config = get_api_config()
    db_client = get_database_client()
    return ReferralService(config=config, db=db_client)


def get_config() -> ApiConfig:
    return get_api_config()

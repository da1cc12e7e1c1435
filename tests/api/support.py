# This file provides shared helpers for API endpoint tests.
# It exists so tests can override service dependencies without touching real databases.
# The helpers build consistent config objects, signed tokens, and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import jwt
from fastapi.testclient import TestClient
from sqlalchemy import event

from referrals.api.api_config import ApiConfig
from referrals.api.app import app
from referrals.api.db_access import DatabaseClient
from referrals.api.ddl import apply_referral_ddl
from referrals.api.dependencies import get_config, get_database_client, get_referral_service
from referrals.api.services.referral_service import ReferralService

TEST_SECRET = "unit-test-secret"


def build_test_config(**overrides: Any) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, Any] = {
        "api_name": "Test Referral API",
        "schema_version": "1.0.0",
        "environment": "test",
        "database_url": "sqlite+pysqlite:///:memory:",
        "access_token_secret": TEST_SECRET,
        "jwt_algorithm": "HS256",
        "title_collation_strength": 2,
        "enable_request_logging": False,
        "allowed_origins": [],
        "referral_table_name": "referrals",
        "user_table_name": "users",
        "request_log_table_name": "api_request_log",
        "app_version": "0.1.0",
    }
    values.update(overrides)
    return ApiConfig(**values)


def make_token(
    *,
    username: str = "alice",
    roles: list[str] | None = None,
    secret: str = TEST_SECRET,
    expires_in: timedelta = timedelta(minutes=15),
) -> str:
    payload = {
        "UserInfo": {"username": username, "roles": roles or ["Employee"]},
        "exp": datetime.now(tz=UTC) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(**token_kwargs: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(**token_kwargs)}"}


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables if existing_tables is not None else {"referrals", "users"}

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def log_request(self, **_: Any) -> None:
        return None


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    referral_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if referral_service is not None:
        app.dependency_overrides[get_referral_service] = lambda: referral_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def build_sqlite_service(
    tmp_path: Path,
    *,
    enforce_foreign_keys: bool = True,
    **config_overrides: Any,
) -> tuple[ReferralService, DatabaseClient]:
    """Build a ReferralService over a fresh file-backed SQLite schema.

    SQLite ignores REFERENCES clauses unless the pragma is set per connection,
    so it is switched on to match the Postgres schema.
    """

    database_url = f"sqlite+pysqlite:///{tmp_path / 'referrals.db'}"
    config = build_test_config(database_url=database_url, **config_overrides)
    db = DatabaseClient(database_url=database_url)

    if enforce_foreign_keys:

        @event.listens_for(db.engine, "connect")
        def _enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    apply_referral_ddl(db.engine, config)
    return ReferralService(config=config, db=db), db


def seed_user(db: DatabaseClient, *, user_id: str, username: str) -> None:
    db.execute(
        "INSERT INTO users (id, username) VALUES (:id, :username)",
        {"id": user_id, "username": username},
    )

"""DDL helpers for the referral API tables."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.engine import Engine

from referrals.api.api_config import ApiConfig, get_api_config
from referrals.api.db_access import DatabaseClient
from referrals.common.logging import configure_logging

LOGGER = logging.getLogger("referrals.ddl")


def build_ddl_statements(
    *,
    referral_table: str,
    user_table: str,
    request_log_table: str,
) -> list[str]:
    """Return CREATE statements in dependency order. Every statement is idempotent."""

    return [
        f"""
        CREATE TABLE IF NOT EXISTS {user_table} (
            id VARCHAR(64) PRIMARY KEY,
            username VARCHAR(255) NOT NULL UNIQUE
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {referral_table} (
            id VARCHAR(32) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL REFERENCES {user_table} (id),
            title TEXT NOT NULL,
            title_key TEXT NOT NULL,
            text TEXT NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL
        )
        """,
        f"""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_{referral_table}_title_key
        ON {referral_table} (title_key)
        """,
        f"""
        CREATE INDEX IF NOT EXISTS ix_{referral_table}_created_at
        ON {referral_table} (created_at)
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {request_log_table} (
            request_id VARCHAR(64) NOT NULL,
            path TEXT NOT NULL,
            method VARCHAR(16) NOT NULL,
            status_code INTEGER NOT NULL,
            duration_ms DOUBLE PRECISION NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL
        )
        """,
    ]


def apply_referral_ddl(engine: Engine, config: ApiConfig) -> None:
    """Create the referral, user, and request log tables when they are missing."""

    statements = build_ddl_statements(
        referral_table=config.referral_table_name,
        user_table=config.user_table_name,
        request_log_table=config.request_log_table_name,
    )
    with engine.begin() as connection:
        for statement in statements:
            connection.exec_driver_sql(statement)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Referral API schema utilities")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL from the environment",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging()
    config = get_api_config()
    if args.database_url:
        config = config.model_copy(update={"database_url": args.database_url})
    db = DatabaseClient(database_url=config.database_url)
    apply_referral_ddl(db.engine, config)
    LOGGER.info(
        "schema applied referral_table=%s user_table=%s request_log_table=%s",
        config.referral_table_name,
        config.user_table_name,
        config.request_log_table_name,
    )


if __name__ == "__main__":
    main()

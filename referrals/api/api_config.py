# This file defines runtime settings for the referral API in one place.
# It exists so token secrets, table names, and title comparison rules can change without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# Table names are validated because they are interpolated into SQL text.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_SUPPORTED_JWT_ALGORITHMS = {"HS256", "HS384", "HS512"}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Referral API"
    schema_version: str = "1.0.0"
    environment: str = "local"
    database_url: str
    access_token_secret: str = Field(repr=False)
    jwt_algorithm: str = "HS256"
    title_collation_strength: int = 2
    enable_request_logging: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    referral_table_name: str = "referrals"
    user_table_name: str = "users"
    request_log_table_name: str = "api_request_log"
    app_version: str = "0.1.0"

    @field_validator("referral_table_name", "user_table_name", "request_log_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _SUPPORTED_JWT_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {value!r}")
        return normalized

    @field_validator("title_collation_strength")
    @classmethod
    def validate_collation_strength(cls, value: int) -> int:
        if value not in (1, 2):
            raise ValueError("title_collation_strength must be 1 (primary) or 2 (secondary).")
        return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Referral API"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "environment": os.getenv("ENV", "local"),
        "database_url": os.getenv("DATABASE_URL", ""),
        "access_token_secret": os.getenv("ACCESS_TOKEN_SECRET", ""),
        "jwt_algorithm": os.getenv("API_JWT_ALGORITHM", "HS256"),
        "title_collation_strength": _env_int("API_TITLE_COLLATION_STRENGTH", 2),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", False),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "referral_table_name": os.getenv("API_REFERRAL_TABLE_NAME", "referrals"),
        "user_table_name": os.getenv("API_USER_TABLE_NAME", "users"),
        "request_log_table_name": os.getenv("API_REQUEST_LOG_TABLE_NAME", "api_request_log"),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    if not config_values["database_url"]:
        raise RuntimeError("DATABASE_URL is required for API startup.")
    if not config_values["access_token_secret"]:
        raise RuntimeError("ACCESS_TOKEN_SECRET is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()

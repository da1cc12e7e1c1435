# This file verifies bearer tokens before any referral route runs.
# It exists so the router can declare authentication once instead of per endpoint.
# Tokens are HS-signed JWTs carrying a `UserInfo` claim with the caller's username and roles.
# A missing header is reported as 401 and a token that fails verification as 403.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any

import jwt
from fastapi import Depends, Header, Request

from referrals.api.api_config import ApiConfig
from referrals.api.dependencies import get_config
from referrals.api.error_handlers import ForbiddenError, UnauthorizedError

LOGGER = logging.getLogger("referrals.auth")

_BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedUser:
    username: str
    roles: tuple[str, ...] = field(default_factory=tuple)


def decode_access_token(token: str, *, secret: str, algorithm: str) -> AuthenticatedUser:
    """Verify signature and expiry, then extract the caller identity."""

    try:
        claims: dict[str, Any] = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as exc:
        raise ForbiddenError() from exc

    user_info = claims.get("UserInfo")
    if not isinstance(user_info, dict) or not isinstance(user_info.get("username"), str):
        raise ForbiddenError()

    roles = user_info.get("roles") or []
    if not isinstance(roles, list):
        raise ForbiddenError()
    return AuthenticatedUser(username=user_info["username"], roles=tuple(str(role) for role in roles))


def require_authenticated_user(
    request: Request,
    config: Annotated[ApiConfig, Depends(get_config)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedUser:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise UnauthorizedError()

    token = authorization[len(_BEARER_PREFIX):].strip()
    try:
        user = decode_access_token(
            token,
            secret=config.access_token_secret,
            algorithm=config.jwt_algorithm,
        )
    except ForbiddenError:
        LOGGER.info(
            "token rejected request_id=%s path=%s",
            getattr(request.state, "request_id", "unknown"),
            request.url.path,
        )
        raise

    request.state.username = user.username
    return user

# This file tests bearer-token enforcement on the referral routes.
# It exists to keep the 401/403 split stable for clients that refresh tokens on 403.

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from referrals.api.auth import decode_access_token
from referrals.api.error_handlers import ForbiddenError
from tests.api.support import TEST_SECRET, FakeDBClient, api_test_client, auth_headers, make_token


class EmptyReferralService:
    def list_referrals(self) -> list[dict[str, object]]:
        return []


def test_missing_authorization_header_is_401() -> None:
    with api_test_client(db_client=FakeDBClient(), referral_service=EmptyReferralService()) as client:
        response = client.get("/referrals")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"
    assert response.headers["www-authenticate"] == "Bearer"


def test_non_bearer_scheme_is_401() -> None:
    with api_test_client(db_client=FakeDBClient(), referral_service=EmptyReferralService()) as client:
        response = client.get("/referrals", headers={"Authorization": "Basic YWxpY2U6c2VjcmV0"})

    assert response.status_code == 401


def test_token_signed_with_other_secret_is_403() -> None:
    with api_test_client(db_client=FakeDBClient(), referral_service=EmptyReferralService()) as client:
        response = client.get("/referrals", headers=auth_headers(secret="not-the-secret"))

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden"


def test_expired_token_is_403() -> None:
    with api_test_client(db_client=FakeDBClient(), referral_service=EmptyReferralService()) as client:
        response = client.get("/referrals", headers=auth_headers(expires_in=timedelta(minutes=-5)))

    assert response.status_code == 403


def test_valid_token_reaches_handler() -> None:
    with api_test_client(db_client=FakeDBClient(), referral_service=EmptyReferralService()) as client:
        response = client.get("/referrals", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == []


def test_health_routes_do_not_require_auth() -> None:
    with api_test_client(db_client=FakeDBClient()) as client:
        response = client.get("/health")

    assert response.status_code == 200


def test_decode_access_token_extracts_user_info() -> None:
    token = make_token(username="bob", roles=["Manager", "Admin"])
    user = decode_access_token(token, secret=TEST_SECRET, algorithm="HS256")

    assert user.username == "bob"
    assert user.roles == ("Manager", "Admin")


def test_decode_access_token_requires_user_info_claim() -> None:
    token = jwt.encode({"sub": "bob"}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(ForbiddenError):
        decode_access_token(token, secret=TEST_SECRET, algorithm="HS256")

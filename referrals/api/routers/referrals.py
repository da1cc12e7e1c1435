# This file defines the referral collection endpoints.
# It exists so list, create, update, and delete share one path and one auth requirement.
# Each route also answers on the trailing-slash path instead of redirecting.
# Every route runs the bearer-token dependency before touching the service.
# Error responses are raised by the service and shaped by the global handlers.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from referrals.api.auth import require_authenticated_user
from referrals.api.dependencies import get_referral_service
from referrals.api.schemas.common import ErrorResponse, MessageResponse
from referrals.api.schemas.referral_schemas import (
    EnrichedReferralV1,
    ReferralCreateRequest,
    ReferralDeleteRequest,
    ReferralUpdateRequest,
)
from referrals.api.services.referral_service import ReferralService

router = APIRouter(
    prefix="/referrals",
    tags=["referrals"],
    dependencies=[Depends(require_authenticated_user)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
ReferralServiceDep = Annotated[ReferralService, Depends(get_referral_service)]


@router.get("", response_model=list[EnrichedReferralV1])
@router.get("/", response_model=list[EnrichedReferralV1], include_in_schema=False)
def list_referrals(service: ReferralServiceDep) -> list[dict[str, object]]:
    return service.list_referrals()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def create_referral(
    service: ReferralServiceDep,
    payload: ReferralCreateRequest | None = None,
) -> dict[str, str]:
    body = payload or ReferralCreateRequest()
    message = service.create_referral(user=body.user, title=body.title, text=body.text)
    return {"message": message}


@router.patch("", response_model=str, responses={409: {"model": ErrorResponse}})
@router.patch("/", response_model=str, include_in_schema=False)
def update_referral(
    service: ReferralServiceDep,
    payload: ReferralUpdateRequest | None = None,
) -> str:
    body = payload or ReferralUpdateRequest()
    return service.update_referral(
        referral_id=body.id,
        user=body.user,
        title=body.title,
        text=body.text,
        completed=body.completed,
    )


@router.delete("", response_model=str)
@router.delete("/", response_model=str, include_in_schema=False)
def delete_referral(
    service: ReferralServiceDep,
    payload: ReferralDeleteRequest | None = None,
) -> str:
    body = payload or ReferralDeleteRequest()
    return service.delete_referral(referral_id=body.id)

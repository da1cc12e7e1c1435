# This file defines request bodies and list rows for the referral endpoints.
# Request fields are all optional at the schema level; presence and type rules are
# enforced by the service so missing fields produce the documented 400 messages.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ReferralCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: str | None = None
    title: str | None = None
    text: str | None = None


class ReferralUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    user: str | None = None
    title: str | None = None
    text: str | None = None
    # kept untyped so a non-boolean reaches the service check instead of being coerced
    completed: Any = None


class ReferralDeleteRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None


class EnrichedReferralV1(BaseModel):
    id: str
    user: str
    title: str
    text: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    username: str | None = None

# This file implements the referral list, create, update, and delete operations.
# It exists so routers stay thin while validation and uniqueness rules live in one place.
# Titles are compared through a normalized key that a unique index also protects.
# The list query joins each referral with its owner's username in one round trip.

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import DataError, IntegrityError

from referrals.api.api_config import ApiConfig
from referrals.api.db_access import DatabaseClient
from referrals.api.error_handlers import ConflictError, NotFoundError, ValidationFailedError
from referrals.api.services.title_keys import normalize_title

LOGGER = logging.getLogger("referrals.service")

MISSING_FIELDS_MESSAGE = "All fields are required"
MISSING_ID_MESSAGE = "Referral ID required"
NO_REFERRALS_MESSAGE = "No referrals found"
NOT_FOUND_MESSAGE = "Referral not found"
DUPLICATE_TITLE_MESSAGE = "Duplicate referral title"
INVALID_DATA_MESSAGE = "Invalid referral data received"
CREATED_MESSAGE = "New referral created"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class ReferralService:
    """Validation and persistence for referral records."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.referral_table = config.referral_table_name
        self.user_table = config.user_table_name
        self.collation_strength = config.title_collation_strength

    def title_key(self, title: str) -> str:
        return normalize_title(title, strength=self.collation_strength)

    def list_referrals(self) -> list[dict[str, Any]]:
        query = f"""
        SELECT
            r.id,
            r.user_id,
            r.title,
            r.text,
            r.completed,
            r.created_at,
            r.updated_at,
            u.username
        FROM {self.referral_table} r
        LEFT JOIN {self.user_table} u ON u.id = r.user_id
        ORDER BY r.created_at ASC, r.id ASC
        """
        rows = self.db.fetch_all(query)
        if not rows:
            raise NotFoundError(NO_REFERRALS_MESSAGE)
        return [self._to_enriched(row) for row in rows]

    def create_referral(self, *, user: Any, title: Any, text: Any) -> str:
        if not (_is_present(user) and _is_present(title) and _is_present(text)):
            raise ValidationFailedError(MISSING_FIELDS_MESSAGE)

        title_key = self.title_key(title)
        if self._find_by_title_key(title_key) is not None:
            raise ConflictError(DUPLICATE_TITLE_MESSAGE)

        referral_id = uuid.uuid4().hex
        now = utc_now().isoformat()
        query = f"""
        INSERT INTO {self.referral_table} (
            id, user_id, title, title_key, text, completed, created_at, updated_at
        ) VALUES (
            :id, :user_id, :title, :title_key, :text, :completed, :created_at, :updated_at
        )
        """
        params = {
            "id": referral_id,
            "user_id": user,
            "title": title,
            "title_key": title_key,
            "text": text,
            "completed": False,
            "created_at": now,
            "updated_at": now,
        }
        try:
            inserted = self.db.execute(query, params)
        except (IntegrityError, DataError) as exc:
            raise self._classify_rejected_write(title_key=title_key, referral_id=None) from exc

        if inserted != 1:
            raise ValidationFailedError(INVALID_DATA_MESSAGE)

        LOGGER.info("referral created id=%s user=%s", referral_id, user)
        return CREATED_MESSAGE

    def update_referral(
        self,
        *,
        referral_id: Any,
        user: Any,
        title: Any,
        text: Any,
        completed: Any,
    ) -> str:
        fields_present = all(_is_present(value) for value in (referral_id, user, title, text))
        # bool only; 1, "true" and similar are rejected
        if not fields_present or not isinstance(completed, bool):
            raise ValidationFailedError(MISSING_FIELDS_MESSAGE)

        if self._find_by_id(referral_id) is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        title_key = self.title_key(title)
        duplicate = self._find_by_title_key(title_key)
        if duplicate is not None and duplicate["id"] != referral_id:
            raise ConflictError(DUPLICATE_TITLE_MESSAGE)

        query = f"""
        UPDATE {self.referral_table}
        SET
            user_id = :user_id,
            title = :title,
            title_key = :title_key,
            text = :text,
            completed = :completed,
            updated_at = :updated_at
        WHERE id = :id
        """
        params = {
            "id": referral_id,
            "user_id": user,
            "title": title,
            "title_key": title_key,
            "text": text,
            "completed": completed,
            "updated_at": utc_now().isoformat(),
        }
        try:
            updated = self.db.execute(query, params)
        except (IntegrityError, DataError) as exc:
            raise self._classify_rejected_write(title_key=title_key, referral_id=referral_id) from exc

        if updated == 0:
            # removed between the lookup and the write
            raise NotFoundError(NOT_FOUND_MESSAGE)

        LOGGER.info("referral updated id=%s completed=%s", referral_id, completed)
        return f"'{title}' updated"

    def delete_referral(self, *, referral_id: Any) -> str:
        if not _is_present(referral_id):
            raise ValidationFailedError(MISSING_ID_MESSAGE)

        referral = self._find_by_id(referral_id)
        if referral is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        deleted = self.db.execute(
            f"DELETE FROM {self.referral_table} WHERE id = :id",
            {"id": referral_id},
        )
        if deleted == 0:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        LOGGER.info("referral deleted id=%s", referral_id)
        return f"Referral '{referral['title']}' with ID {referral['id']} deleted"

    def _find_by_id(self, referral_id: str) -> dict[str, Any] | None:
        query = f"SELECT id, title FROM {self.referral_table} WHERE id = :id"
        return self.db.fetch_one(query, {"id": referral_id})

    def _find_by_title_key(self, title_key: str) -> dict[str, Any] | None:
        query = f"SELECT id FROM {self.referral_table} WHERE title_key = :title_key LIMIT 1"
        return self.db.fetch_one(query, {"title_key": title_key})

    def _classify_rejected_write(self, *, title_key: str, referral_id: str | None) -> Exception:
        """Map a write the store rejected (constraint or value out of range) onto a client error."""

        duplicate = self._find_by_title_key(title_key)
        if duplicate is not None and duplicate["id"] != referral_id:
            LOGGER.warning("referral write lost title race title_key=%s", title_key)
            return ConflictError(DUPLICATE_TITLE_MESSAGE)
        LOGGER.warning("referral write rejected by store id=%s", referral_id)
        return ValidationFailedError(INVALID_DATA_MESSAGE)

    @staticmethod
    def _to_enriched(row: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "user": row["user_id"],
            "title": row["title"],
            "text": row["text"],
            "completed": bool(row["completed"]),
            "created_at": row["created_at"],
            "updated_at": row["updated_at"],
            "username": row["username"],
        }

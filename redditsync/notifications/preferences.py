"""
Per-user notification preferences.

Stored as one JSON record per user, keyed by an opaque user id. Reads of
an absent record return the defaults; updates merge into the current
record and are validated before they are written.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from redditsync.errors import ValidationError
from redditsync.models.notification import NotificationPreferences
from redditsync.observability import get_logger
from redditsync.storage.kv import KeyValueStore

from .gate import parse_hhmm

logger = get_logger(__name__)

KEY_PREFIX = "notification_settings:"
_QUIET_HOURS_KEYS = {"startTime": "start", "endTime": "end"}


class NotificationPreferencesStore:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{KEY_PREFIX}{user_id}"

    async def get(self, user_id: str) -> NotificationPreferences:
        """Stored preferences, or the defaults when none are stored."""
        raw = await self._store.get(self._key(user_id))
        if not raw:
            return NotificationPreferences()
        try:
            return NotificationPreferences.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(
                f"Unreadable notification settings, using defaults: {e}",
                extra={"user_id": user_id},
            )
            return NotificationPreferences()

    async def update(self, user_id: str, changes: dict[str, Any]) -> NotificationPreferences:
        """
        Merge `changes` (snake_case or camelCase keys) into the stored record.

        Raises:
            ValidationError: unknown values or malformed quiet-hours times
            StorageError: the backing store failed
        """
        current = await self.get(user_id)
        merged = current.model_dump(by_alias=True, mode="json")

        for key, value in changes.items():
            field = _canonical(key)
            if field == "quietHours" and isinstance(value, dict):
                renamed = {_QUIET_HOURS_KEYS.get(k, k): v for k, v in value.items()}
                merged["quietHours"] = {**merged["quietHours"], **renamed}
            else:
                merged[field] = value

        try:
            prefs = NotificationPreferences.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid notification settings: {e}") from e

        if prefs.quiet_hours.enabled:
            parse_hhmm(prefs.quiet_hours.start)
            parse_hhmm(prefs.quiet_hours.end)

        await self._store.set(self._key(user_id), prefs.model_dump_json(by_alias=True))
        logger.info("Notification settings updated", extra={"user_id": user_id})
        return prefs


def _canonical(key: str) -> str:
    """snake_case -> camelCase so that both spellings merge into one key."""
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)

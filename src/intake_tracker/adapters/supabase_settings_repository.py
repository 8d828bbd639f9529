"""Supabase repository for key-value settings."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from intake_tracker.domain.errors import StorageError
from intake_tracker.services.storage import SettingsRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation for settings."""

    client: Client

    def get_setting(self, key: str) -> str | None:
        """Return the stored value for a key."""
        try:
            response = (
                self.client.table("settings")
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to read setting %s", key)
            return None
        if not response.data:
            return None
        value = response.data[0].get("value")
        return None if value is None else str(value)

    def set_setting(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        try:
            self.client.table("settings").upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            ).execute()
        except Exception as exc:
            raise StorageError(f"Failed to write setting {key}") from exc

"""Persistence interfaces for settings and consumption records."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from intake_tracker.domain.records import ConsumptionRecord


class SettingsRepository(Protocol):
    """String-keyed settings store."""

    def get_setting(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set_setting(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""


class RecordRepository(Protocol):
    """Append/query/delete log of consumption records."""

    def get_all_records(self) -> list[ConsumptionRecord]:
        """Return every record, newest first."""

    def get_records(self, start: datetime, end: datetime) -> list[ConsumptionRecord]:
        """Return records with start <= timestamp < end, newest first."""

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        """Return a record by id."""

    def save_record(self, record: ConsumptionRecord) -> None:
        """Append a record to the log."""

    def delete_record(self, record_id: UUID) -> None:
        """Remove a record by id."""

    def clear_records(self, start: datetime, end: datetime) -> None:
        """Remove all records with start <= timestamp < end."""

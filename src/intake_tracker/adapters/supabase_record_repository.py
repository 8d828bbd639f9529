"""Supabase repository for consumption records."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from intake_tracker.domain.errors import StorageError
from intake_tracker.domain.records import ConsumptionRecord, MealCategory
from intake_tracker.services.storage import RecordRepository

_logger = logging.getLogger(__name__)

_TABLE = "consumption_records"
_COLUMNS = "id, category, calories, water_amount, timestamp"


@dataclass
class SupabaseRecordRepository(RecordRepository):
    """Supabase implementation for the record log.

    Read failures are logged and come back as empty results; write failures
    raise ``StorageError``.
    """

    client: Client

    def get_all_records(self) -> list[ConsumptionRecord]:
        """Return every record, newest first."""
        try:
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .order("timestamp", desc=True)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to fetch consumption records")
            return []
        return _parse_rows(response.data)

    def get_records(self, start: datetime, end: datetime) -> list[ConsumptionRecord]:
        """Return records in [start, end), newest first."""
        try:
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .gte("timestamp", start.isoformat())
                .lt("timestamp", end.isoformat())
                .order("timestamp", desc=True)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to fetch consumption records for range")
            return []
        return _parse_rows(response.data)

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        """Return a record by id."""
        try:
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("id", str(record_id))
                .limit(1)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to fetch consumption record")
            return None
        records = _parse_rows(response.data)
        return records[0] if records else None

    def save_record(self, record: ConsumptionRecord) -> None:
        """Insert a record row."""
        try:
            self.client.table(_TABLE).insert(
                {
                    "id": str(record.id),
                    "category": record.category.value,
                    "calories": record.calories,
                    "water_amount": record.water_amount,
                    "timestamp": record.timestamp.isoformat(),
                }
            ).execute()
        except Exception as exc:
            raise StorageError("Failed to save consumption record") from exc

    def delete_record(self, record_id: UUID) -> None:
        """Delete a record row by id."""
        try:
            self.client.table(_TABLE).delete().eq("id", str(record_id)).execute()
        except Exception as exc:
            raise StorageError("Failed to delete consumption record") from exc

    def clear_records(self, start: datetime, end: datetime) -> None:
        """Delete every record row in [start, end)."""
        try:
            self.client.table(_TABLE).delete().gte(
                "timestamp", start.isoformat()
            ).lt("timestamp", end.isoformat()).execute()
        except Exception as exc:
            raise StorageError("Failed to clear consumption records") from exc


def _parse_rows(rows: list[dict[str, object]] | None) -> list[ConsumptionRecord]:
    records = []
    for row in rows or []:
        try:
            records.append(_parse_row(row))
        except (KeyError, ValueError):
            _logger.warning("Skipping malformed consumption record: %r", row)
    return records


def _parse_row(row: dict[str, object]) -> ConsumptionRecord:
    water = row.get("water_amount")
    return ConsumptionRecord(
        id=UUID(str(row["id"])),
        category=MealCategory(str(row["category"])),
        calories=int(row.get("calories") or 0),
        water_amount=float(water) if isinstance(water, int | float) else None,
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
    )

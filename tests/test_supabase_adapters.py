"""Tests for Supabase adapter implementations."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from intake_tracker.adapters.supabase_record_repository import (
    SupabaseRecordRepository,
)
from intake_tracker.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from intake_tracker.domain.errors import StorageError
from intake_tracker.domain.records import ConsumptionRecord, MealCategory
from tests.conftest import FakeSupabaseClient


def test_supabase_settings_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("settings")
    table.queue("select", [{"value": "2.5"}])

    repository = SupabaseSettingsRepository(client)
    value = repository.get_setting("WaterTarget")
    missing = repository.get_setting("CalorieTarget")
    repository.set_setting("CalorieTarget", "1800")

    assert value == "2.5"
    assert missing is None
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["key"] == "CalorieTarget"
    assert table.last_payload["value"] == "1800"


def test_supabase_settings_read_failure_returns_none() -> None:
    client = FakeSupabaseClient()
    client.table("settings").fail = True

    repository = SupabaseSettingsRepository(client)

    assert repository.get_setting("WaterTarget") is None


def test_supabase_settings_write_failure_raises() -> None:
    client = FakeSupabaseClient()
    client.table("settings").fail = True

    repository = SupabaseSettingsRepository(client)

    with pytest.raises(StorageError):
        repository.set_setting("WaterTarget", "3.0")


def test_supabase_record_repository_parses_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("consumption_records")
    meal_id = uuid4()
    drink_id = uuid4()
    table.queue(
        "select",
        [
            {
                "id": str(drink_id),
                "category": "drink",
                "calories": 0,
                "water_amount": 0.5,
                "timestamp": "2026-03-10T12:00:00+00:00",
            },
            {
                "id": str(meal_id),
                "category": "breakfast",
                "calories": 420,
                "water_amount": None,
                "timestamp": "2026-03-10T08:00:00+00:00",
            },
            {"id": "not-a-uuid", "category": "snack", "timestamp": "bad"},
        ],
    )

    repository = SupabaseRecordRepository(client)
    start = datetime(2026, 3, 10, tzinfo=UTC)
    records = repository.get_records(start, start + timedelta(days=1))

    assert [record.id for record in records] == [drink_id, meal_id]
    assert records[0].water_amount == 0.5
    assert records[1].category is MealCategory.BREAKFAST
    assert records[1].water_amount is None
    assert ("gte", "timestamp", start.isoformat()) in table.last_filters
    assert (
        "lt",
        "timestamp",
        (start + timedelta(days=1)).isoformat(),
    ) in table.last_filters


def test_supabase_record_repository_save_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("consumption_records")
    record = ConsumptionRecord.drink(0.33, datetime(2026, 3, 10, 9, tzinfo=UTC))

    repository = SupabaseRecordRepository(client)
    repository.save_record(record)

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["id"] == str(record.id)
    assert table.last_payload["category"] == "drink"
    assert table.last_payload["water_amount"] == 0.33
    assert table.last_payload["timestamp"] == "2026-03-10T09:00:00+00:00"

    repository.delete_record(record.id)

    assert table.last_filters == [("eq", "id", str(record.id))]


def test_supabase_record_repository_get_record_missing() -> None:
    client = FakeSupabaseClient()

    repository = SupabaseRecordRepository(client)

    assert repository.get_record(uuid4()) is None


def test_supabase_record_read_failure_returns_empty() -> None:
    client = FakeSupabaseClient()
    client.table("consumption_records").fail = True

    repository = SupabaseRecordRepository(client)
    start = datetime(2026, 3, 10, tzinfo=UTC)

    assert repository.get_all_records() == []
    assert repository.get_records(start, start + timedelta(days=1)) == []
    assert repository.get_record(uuid4()) is None


def test_supabase_record_write_failure_raises() -> None:
    client = FakeSupabaseClient()
    client.table("consumption_records").fail = True
    repository = SupabaseRecordRepository(client)
    record = ConsumptionRecord.meal(MealCategory.SNACK, 150)
    start = datetime(2026, 3, 10, tzinfo=UTC)

    with pytest.raises(StorageError):
        repository.save_record(record)
    with pytest.raises(StorageError):
        repository.delete_record(record.id)
    with pytest.raises(StorageError):
        repository.clear_records(start, start + timedelta(days=1))

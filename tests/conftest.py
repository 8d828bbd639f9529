"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from intake_tracker.adapters.telegram_client import TelegramClient
from intake_tracker.config import Settings
from intake_tracker.containers import AppContainer
from intake_tracker.domain.errors import StorageError
from intake_tracker.domain.records import ConsumptionRecord
from intake_tracker.scheduler import DailyJobs
from intake_tracker.services.notifications import NotificationService
from intake_tracker.services.storage import RecordRepository, SettingsRepository
from intake_tracker.services.targets import TargetSettingsService
from intake_tracker.services.tracker import IntakeTracker

NOW = datetime(2026, 3, 10, 15, 30, tzinfo=UTC)


@dataclass
class FakeClock:
    """Clock that only moves when told to."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class InMemorySettingsRepository(SettingsRepository):
    """In-memory settings store for tests."""

    values: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False
    failing_keys: set[str] = field(default_factory=set)

    def get_setting(self, key: str) -> str | None:
        return self.values.get(key)

    def set_setting(self, key: str, value: str) -> None:
        if self.fail_writes or key in self.failing_keys:
            raise StorageError(f"Failed to write setting {key}")
        self.values[key] = value


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record log for tests."""

    records: list[ConsumptionRecord] = field(default_factory=list)
    fail_writes: bool = False
    fail_reads: bool = False
    deleted_ids: list[UUID] = field(default_factory=list)

    def get_all_records(self) -> list[ConsumptionRecord]:
        if self.fail_reads:
            return []
        return sorted(self.records, key=lambda record: record.timestamp, reverse=True)

    def get_records(self, start, end) -> list[ConsumptionRecord]:
        return [
            record
            for record in self.get_all_records()
            if start <= record.timestamp < end
        ]

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        if self.fail_reads:
            return None
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def save_record(self, record: ConsumptionRecord) -> None:
        if self.fail_writes:
            raise StorageError("Failed to save consumption record")
        self.records.append(record)

    def delete_record(self, record_id: UUID) -> None:
        if self.fail_writes:
            raise StorageError("Failed to delete consumption record")
        self.deleted_ids.append(record_id)
        self.records = [record for record in self.records if record.id != record_id]

    def clear_records(self, start, end) -> None:
        if self.fail_writes:
            raise StorageError("Failed to clear consumption records")
        self.records = [
            record
            for record in self.records
            if not start <= record.timestamp < end
        ]


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    fail: bool = False

    async def send_message(self, chat_id: int, text: str) -> None:
        if self.fail:
            raise RuntimeError("telegram is down")
        self.messages.append((chat_id, text))


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Chainable stand-in for a Supabase table query builder."""

    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    fail: bool = False

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        self.last_filters = []
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        self.last_filters = []
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lt", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.fail:
            raise ConnectionError("supabase unavailable")
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def record_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def settings_repository() -> InMemorySettingsRepository:
    return InMemorySettingsRepository()


@pytest.fixture
def target_settings_service(
    settings_repository: InMemorySettingsRepository,
) -> TargetSettingsService:
    return TargetSettingsService(settings_repository)


@pytest.fixture
def tracker(
    record_repository: InMemoryRecordRepository,
    target_settings_service: TargetSettingsService,
    clock: FakeClock,
) -> IntakeTracker:
    return IntakeTracker(
        records=record_repository,
        target_settings=target_settings_service,
        timezone=ZoneInfo("UTC"),
        clock=clock,
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def notification_service(
    telegram_client: FakeTelegramClient,
) -> NotificationService:
    return NotificationService(telegram_client=telegram_client, chat_id=42)


@pytest.fixture
def container(
    settings: Settings,
    target_settings_service: TargetSettingsService,
    tracker: IntakeTracker,
    notification_service: NotificationService,
) -> AppContainer:
    tracker.subscribe(notification_service.on_target_reached)
    daily_jobs = DailyJobs(
        scheduler=AsyncIOScheduler(timezone=ZoneInfo("UTC")),
        tracker=tracker,
        notification_service=notification_service,
        timezone=ZoneInfo("UTC"),
    )

    async def close_resources() -> None:
        await notification_service.drain()

    return AppContainer(
        settings=settings,
        target_settings_service=target_settings_service,
        tracker=tracker,
        notification_service=notification_service,
        daily_jobs=daily_jobs,
        close_resources=close_resources,
    )

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from supabase import create_client

from intake_tracker.adapters.supabase_record_repository import (
    SupabaseRecordRepository,
)
from intake_tracker.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from intake_tracker.adapters.telegram_client import HttpxTelegramClient
from intake_tracker.config import Settings
from intake_tracker.scheduler import DailyJobs
from intake_tracker.services.notifications import NotificationService
from intake_tracker.services.targets import TargetSettingsService
from intake_tracker.services.tracker import IntakeTracker


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    target_settings_service: TargetSettingsService
    tracker: IntakeTracker
    notification_service: NotificationService
    daily_jobs: DailyJobs
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    zone = resolved_settings.zone
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    target_settings_service = TargetSettingsService(
        SupabaseSettingsRepository(supabase_client)
    )
    tracker = IntakeTracker(
        records=SupabaseRecordRepository(supabase_client),
        target_settings=target_settings_service,
        timezone=zone,
    )
    telegram_client = None
    if resolved_settings.telegram_bot_token:
        telegram_client = HttpxTelegramClient.create(
            resolved_settings.telegram_bot_token
        )
    notification_service = NotificationService(
        telegram_client=telegram_client,
        chat_id=resolved_settings.telegram_chat_id,
    )
    tracker.subscribe(notification_service.on_target_reached)
    daily_jobs = DailyJobs(
        scheduler=AsyncIOScheduler(timezone=zone),
        tracker=tracker,
        notification_service=notification_service,
        timezone=zone,
    )

    async def close_resources() -> None:
        await notification_service.drain()
        if telegram_client is not None:
            await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        target_settings_service=target_settings_service,
        tracker=tracker,
        notification_service=notification_service,
        daily_jobs=daily_jobs,
        close_resources=close_resources,
    )

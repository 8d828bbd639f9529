"""Fire-and-forget notification delivery."""

import asyncio
import logging
from dataclasses import dataclass, field
from uuid import uuid4

from intake_tracker.adapters.telegram_client import TelegramClient
from intake_tracker.domain.tracking import TargetKind, TargetReached

_logger = logging.getLogger(__name__)

DAILY_REMINDER_ID = "dailyReminder"


@dataclass(frozen=True)
class Notification:
    """A local alert request."""

    identifier: str
    title: str
    body: str


@dataclass
class NotificationService:
    """Delivers alerts to a Telegram chat, or to the log when unconfigured."""

    telegram_client: TelegramClient | None = None
    chat_id: int | None = None
    _pending: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def is_configured(self) -> bool:
        """True when alerts go to Telegram."""
        return self.telegram_client is not None and self.chat_id is not None

    async def send(self, notification: Notification) -> None:
        """Deliver a notification; failures are logged, not raised."""
        if self.telegram_client is None or self.chat_id is None:
            _logger.info(
                "Notification %s: %s - %s",
                notification.identifier,
                notification.title,
                notification.body,
            )
            return
        try:
            await self.telegram_client.send_message(
                chat_id=self.chat_id,
                text=f"{notification.title}\n{notification.body}",
            )
        except Exception:
            _logger.exception(
                "Failed to deliver notification", extra={"id": notification.identifier}
            )

    def on_target_reached(self, event: TargetReached) -> None:
        """Queue a target-reached alert without blocking the caller."""
        notification = target_reached_notification(event)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.info(
                "No event loop, logging notification: %s - %s",
                notification.title,
                notification.body,
            )
            return
        task = loop.create_task(self.send(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def send_daily_reminder(self) -> None:
        """Deliver the daily logging reminder."""
        await self.send(
            Notification(
                identifier=DAILY_REMINDER_ID,
                title="Intake Reminder",
                body="Don't forget to log your food and water intake today!",
            )
        )

    async def drain(self) -> None:
        """Wait for queued alerts to finish."""
        if self._pending:
            await asyncio.gather(*self._pending)


def target_reached_notification(event: TargetReached) -> Notification:
    """Build the alert for a target-reached event."""
    if event.kind is TargetKind.CALORIES:
        return Notification(
            identifier=str(uuid4()),
            title="Calorie Target Reached!",
            body=(
                "You've hit your daily calorie goal of "
                f"{int(event.target)} calories."
            ),
        )
    return Notification(
        identifier=str(uuid4()),
        title="Water Target Reached!",
        body=f"You've hit your daily water goal of {event.target:g}L.",
    )

"""Scheduled daily jobs: midnight reset and logging reminder."""

import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from intake_tracker.domain.errors import StorageError
from intake_tracker.domain.tracking import ReminderSettings
from intake_tracker.services.notifications import NotificationService
from intake_tracker.services.tracker import IntakeTracker

_logger = logging.getLogger(__name__)

RESET_JOB_ID = "daily_reset"
REMINDER_JOB_ID = "daily_reminder"


@dataclass
class DailyJobs:
    """Owns the cron jobs bound to local wall-clock time."""

    scheduler: AsyncIOScheduler
    tracker: IntakeTracker
    notification_service: NotificationService
    timezone: ZoneInfo

    def start(self, reminder: ReminderSettings) -> None:
        """Register the jobs and start the scheduler."""
        self.schedule_reset()
        self.schedule_reminder(reminder)
        self.scheduler.start()
        _logger.info("Scheduler started")

    def shutdown(self) -> None:
        """Stop the scheduler, dropping pending runs."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            _logger.info("Scheduler stopped")

    def schedule_reset(self) -> None:
        """Run the daily reset at every local midnight."""
        self._remove_if_present(RESET_JOB_ID)
        self.scheduler.add_job(
            self._run_reset,
            CronTrigger(hour=0, minute=0, timezone=self.timezone),
            id=RESET_JOB_ID,
        )

    def cancel_reset(self) -> None:
        """Stop the daily reset job."""
        self._remove_if_present(RESET_JOB_ID)

    def schedule_reminder(self, reminder: ReminderSettings) -> None:
        """Replace the reminder job to match the given preferences."""
        self._remove_if_present(REMINDER_JOB_ID)
        if not reminder.enabled:
            return
        self.scheduler.add_job(
            self.notification_service.send_daily_reminder,
            CronTrigger(
                hour=reminder.remind_at.hour,
                minute=reminder.remind_at.minute,
                timezone=self.timezone,
            ),
            id=REMINDER_JOB_ID,
        )

    async def _run_reset(self) -> None:
        try:
            self.tracker.reset_daily()
        except StorageError:
            _logger.exception("Scheduled daily reset failed")

    def _remove_if_present(self, job_id: str) -> None:
        if self.scheduler.get_job(job_id) is not None:
            self.scheduler.remove_job(job_id)

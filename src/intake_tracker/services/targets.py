"""Target and reminder settings service."""

import logging
from dataclasses import dataclass
from datetime import time

from intake_tracker.domain.tracking import (
    CALORIE_TARGET_KEY,
    REMINDER_ENABLED_KEY,
    REMINDER_TIME_KEY,
    WATER_TARGET_KEY,
    ReminderSettings,
    Targets,
)
from intake_tracker.services.storage import SettingsRepository

_logger = logging.getLogger(__name__)


@dataclass
class TargetSettingsService:
    """Reads and persists daily targets and reminder preferences."""

    repository: SettingsRepository

    def load_targets(self) -> Targets:
        """Return stored targets, falling back to defaults."""
        defaults = Targets()
        return Targets(
            water_target=self._read(
                WATER_TARGET_KEY, _positive_float, defaults.water_target
            ),
            calorie_target=self._read(
                CALORIE_TARGET_KEY, _positive_int, defaults.calorie_target
            ),
        )

    def save_water_target(self, value: float) -> None:
        """Persist the water target in litres."""
        self.repository.set_setting(WATER_TARGET_KEY, str(float(value)))

    def save_calorie_target(self, value: int) -> None:
        """Persist the calorie target."""
        self.repository.set_setting(CALORIE_TARGET_KEY, str(int(value)))

    def load_reminder(self) -> ReminderSettings:
        """Return stored reminder preferences, falling back to defaults."""
        defaults = ReminderSettings()
        return ReminderSettings(
            enabled=self._read(REMINDER_ENABLED_KEY, _parse_bool, defaults.enabled),
            remind_at=self._read(
                REMINDER_TIME_KEY, parse_reminder_time, defaults.remind_at
            ),
        )

    def save_reminder(self, reminder: ReminderSettings) -> None:
        """Persist reminder preferences."""
        self.repository.set_setting(
            REMINDER_ENABLED_KEY, "true" if reminder.enabled else "false"
        )
        self.repository.set_setting(
            REMINDER_TIME_KEY, reminder.remind_at.strftime("%H:%M")
        )

    def _read(self, key, parse, default):  # type: ignore[no-untyped-def]
        raw = self.repository.get_setting(key)
        if raw is None:
            return default
        try:
            return parse(raw)
        except ValueError:
            _logger.warning("Ignoring unparsable setting %s=%r", key, raw)
            return default


def parse_reminder_time(raw: str) -> time:
    """Parse an HH:MM string."""
    hour, _, minute = raw.strip().partition(":")
    if not hour.isdigit() or not minute.isdigit():
        raise ValueError(f"Invalid reminder time: {raw!r}")
    return time(hour=int(hour), minute=int(minute))


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError(f"Target must be positive: {raw!r}")
    return value


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise ValueError(f"Target must be positive: {raw!r}")
    return value


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"true", "1", "yes"}:
        return True
    if value in {"false", "0", "no"}:
        return False
    raise ValueError(f"Invalid boolean: {raw!r}")

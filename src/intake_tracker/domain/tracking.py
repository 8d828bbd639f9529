"""Domain models for targets, totals and status labels."""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from intake_tracker.domain.records import ConsumptionRecord

DEFAULT_WATER_TARGET = 2.0
DEFAULT_CALORIE_TARGET = 2000
DEFAULT_REMINDER_TIME = time(hour=12)

WATER_TARGET_KEY = "WaterTarget"
CALORIE_TARGET_KEY = "CalorieTarget"
REMINDER_ENABLED_KEY = "ReminderEnabled"
REMINDER_TIME_KEY = "ReminderTime"


class HealthStatus(str, Enum):
    """Label derived from both progress ratios."""

    NORMAL = "normal"
    EXCELLENT = "excellent"
    NEEDS_WATER = "needs_water"
    NEEDS_CALORIES = "needs_calories"


class IntakeStatus(str, Enum):
    """Safety label for a prospective addition."""

    NORMAL = "normal"
    TARGET_REACHED = "target_reached"
    EXCESSIVE = "excessive"
    DANGEROUS = "dangerous"


class TargetKind(str, Enum):
    """Which daily target an event refers to."""

    CALORIES = "calories"
    WATER = "water"


@dataclass(frozen=True)
class Targets:
    """Daily calorie and water goals."""

    water_target: float = DEFAULT_WATER_TARGET
    calorie_target: int = DEFAULT_CALORIE_TARGET


@dataclass(frozen=True)
class ReminderSettings:
    """Daily reminder preferences."""

    enabled: bool = True
    remind_at: time = DEFAULT_REMINDER_TIME


@dataclass(frozen=True)
class DailyTotals:
    """Calories and water summed over one local calendar day."""

    day: date
    calories: int = 0
    water: float = 0.0


@dataclass(frozen=True)
class TargetReached:
    """Emitted when a daily total crosses its target."""

    kind: TargetKind
    total: float
    target: float


@dataclass(frozen=True)
class WeekdayTotals:
    """One bar of the weekly overview."""

    day: date
    label: str
    calories: int
    water: float


@dataclass(frozen=True)
class DaySummary:
    """Everything the summary screen shows for today."""

    totals: DailyTotals
    targets: Targets
    calorie_progress: float
    water_progress: float
    health_status: HealthStatus
    is_over_calorie_target: bool
    previous_day_calories: int
    average_daily_calories: int
    records: list[ConsumptionRecord]
    week: list[WeekdayTotals]

"""Pydantic models for the entry form and settings screen."""

from datetime import datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from intake_tracker.domain.records import ConsumptionRecord, MealCategory
from intake_tracker.domain.tracking import (
    DailyTotals,
    DaySummary,
    IntakeStatus,
    ReminderSettings,
    Targets,
)

MAX_MEAL_CALORIES = 5000
MAX_DRINK_LITRES = 5.0


class EntryForm(BaseModel):
    """A meal or drink as entered by the user."""

    category: MealCategory
    calories: int | None = Field(default=None, gt=0, lt=MAX_MEAL_CALORIES)
    water_amount: float | None = Field(default=None, gt=0, lt=MAX_DRINK_LITRES)

    @model_validator(mode="after")
    def _check_payload(self) -> "EntryForm":
        if self.category is MealCategory.DRINK:
            if self.water_amount is None:
                raise ValueError("drink entries need water_amount")
            if self.calories is not None:
                raise ValueError("drink entries cannot carry calories")
        else:
            if self.calories is None:
                raise ValueError("meal entries need calories")
            if self.water_amount is not None:
                raise ValueError("only drink entries carry water_amount")
        return self

    def to_record(self, timestamp: datetime) -> ConsumptionRecord:
        """Create a record stamped with the given time."""
        if self.category is MealCategory.DRINK:
            return ConsumptionRecord.drink(self.water_amount or 0.0, timestamp)
        return ConsumptionRecord.meal(self.category, self.calories or 0, timestamp)


class SettingsOut(BaseModel):
    """The settings screen."""

    water_target: float
    calorie_target: int
    reminder_enabled: bool
    reminder_time: time

    @classmethod
    def from_domain(
        cls, targets: Targets, reminder: ReminderSettings
    ) -> "SettingsOut":
        return cls(
            water_target=targets.water_target,
            calorie_target=targets.calorie_target,
            reminder_enabled=reminder.enabled,
            reminder_time=reminder.remind_at,
        )


class SettingsForm(BaseModel):
    """Targets and reminder preferences from the settings screen."""

    water_target: float = Field(ge=0.5, le=5.0)
    calorie_target: int = Field(ge=1000, le=4000)
    reminder_enabled: bool = True
    reminder_time: time = time(hour=12)

    def reminder(self) -> ReminderSettings:
        """Reminder preferences without seconds."""
        return ReminderSettings(
            enabled=self.reminder_enabled,
            remind_at=self.reminder_time.replace(second=0, microsecond=0, tzinfo=None),
        )


class RecordOut(BaseModel):
    """A record as shown in lists."""

    id: UUID
    category: MealCategory
    calories: int
    water_amount: float | None
    timestamp: datetime

    @classmethod
    def from_domain(cls, record: ConsumptionRecord) -> "RecordOut":
        return cls(
            id=record.id,
            category=record.category,
            calories=record.calories,
            water_amount=record.water_amount,
            timestamp=record.timestamp,
        )


class IntakeCheck(BaseModel):
    """Outcome of validating or submitting an entry."""

    status: IntakeStatus
    record: RecordOut | None = None


class TotalsOut(BaseModel):
    """Totals for one day."""

    day: str
    calories: int
    water: float

    @classmethod
    def from_domain(cls, totals: DailyTotals) -> "TotalsOut":
        return cls(
            day=totals.day.isoformat(), calories=totals.calories, water=totals.water
        )


class WeekdayOut(TotalsOut):
    """One bar of the weekly overview."""

    label: str


class SummaryOut(BaseModel):
    """The summary screen."""

    totals: TotalsOut
    water_target: float
    calorie_target: int
    calorie_progress: float
    water_progress: float
    health_status: str
    is_over_calorie_target: bool
    previous_day_calories: int
    average_daily_calories: int
    records: list[RecordOut]
    week: list[WeekdayOut]

    @classmethod
    def from_domain(cls, summary: DaySummary) -> "SummaryOut":
        return cls(
            totals=TotalsOut.from_domain(summary.totals),
            water_target=summary.targets.water_target,
            calorie_target=summary.targets.calorie_target,
            calorie_progress=round(summary.calorie_progress, 4),
            water_progress=round(summary.water_progress, 4),
            health_status=summary.health_status.value,
            is_over_calorie_target=summary.is_over_calorie_target,
            previous_day_calories=summary.previous_day_calories,
            average_daily_calories=summary.average_daily_calories,
            records=[RecordOut.from_domain(record) for record in summary.records],
            week=[
                WeekdayOut(
                    day=entry.day.isoformat(),
                    calories=entry.calories,
                    water=entry.water,
                    label=entry.label,
                )
                for entry in summary.week
            ],
        )

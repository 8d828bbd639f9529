"""Daily intake aggregation and classification."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from intake_tracker.domain.errors import IntakeRejectedError
from intake_tracker.domain.records import ConsumptionRecord
from intake_tracker.domain.tracking import (
    DailyTotals,
    DaySummary,
    HealthStatus,
    IntakeStatus,
    TargetKind,
    TargetReached,
    Targets,
    WeekdayTotals,
)
from intake_tracker.services.storage import RecordRepository
from intake_tracker.services.targets import TargetSettingsService

_logger = logging.getLogger(__name__)

DANGEROUS_CALORIE_TOTAL = 5000
DANGEROUS_WATER_RATIO = 2.0
EXCESSIVE_RATIO = 1.5
TARGET_RATIO = 1.0
AVERAGE_WINDOW_DAYS = 30
WEEK_DAYS = 7

TargetReachedListener = Callable[[TargetReached], None]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class IntakeTracker:
    """Keeps today's running totals and classifies intake against targets.

    Totals are rebuilt from the record log on construction and whenever the
    local calendar day has changed since they were last computed. Between
    those points they are maintained incrementally by ``add_record`` and
    ``delete_record``.
    """

    records: RecordRepository
    target_settings: TargetSettingsService
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = _utc_now
    _targets: Targets = field(init=False)
    _totals: DailyTotals = field(init=False)
    _listeners: list[TargetReachedListener] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self._targets = self.target_settings.load_targets()
        self.refresh()

    @property
    def targets(self) -> Targets:
        """Current daily targets."""
        return self._targets

    @property
    def today_totals(self) -> DailyTotals:
        """Running totals for the current local day."""
        self._ensure_current_day()
        return self._totals

    @property
    def calorie_progress(self) -> float:
        """Today's calories divided by the calorie target."""
        return self.today_totals.calories / self._targets.calorie_target

    @property
    def water_progress(self) -> float:
        """Today's water divided by the water target."""
        return self.today_totals.water / self._targets.water_target

    @property
    def is_over_calorie_target(self) -> bool:
        """True once today's calories exceed the target."""
        return self.today_totals.calories > self._targets.calorie_target

    def now(self) -> datetime:
        """Return the current time."""
        return self.clock()

    def today(self) -> date:
        """Return the current local date."""
        return self.now().astimezone(self.timezone).date()

    def subscribe(self, listener: TargetReachedListener) -> None:
        """Register a callback for target-reached events."""
        self._listeners.append(listener)

    def refresh(self) -> None:
        """Recompute today's running totals from storage."""
        self._totals = self.totals_for(self.today())

    def add_record(self, record: ConsumptionRecord) -> None:
        """Persist a record and fold it into today's totals."""
        self._ensure_current_day()
        before = self._totals
        self.records.save_record(record)
        _logger.info(
            "Recorded %s: calories=%s water=%s",
            record.category.value,
            record.calories,
            record.water_amount,
        )
        if self._local_day(record.timestamp) != before.day:
            return
        calories, water = record.contribution
        self._totals = DailyTotals(
            day=before.day,
            calories=before.calories + calories,
            water=_round_litres(before.water + water),
        )
        self._emit_crossings(before, self._totals)

    def delete_record(self, record_id: UUID) -> None:
        """Remove a record and take it out of today's totals if needed.

        The storage delete is always issued; the lookup only decides whether
        the running totals change.
        """
        self._ensure_current_day()
        record = self.records.get_record(record_id)
        self.records.delete_record(record_id)
        if record is None:
            _logger.info("Record %s not found, totals unchanged", record_id)
            return
        if self._local_day(record.timestamp) != self._totals.day:
            return
        calories, water = record.contribution
        self._totals = DailyTotals(
            day=self._totals.day,
            calories=self._totals.calories - calories,
            water=_round_litres(self._totals.water - water),
        )

    def submit(self, record: ConsumptionRecord) -> IntakeStatus:
        """Validate and add a record, refusing dangerous amounts."""
        if record.water_amount is not None:
            status = self.validate_intake(water=record.water_amount)
        else:
            status = self.validate_intake(calories=record.calories)
        if status is IntakeStatus.DANGEROUS:
            _logger.warning("Rejected %s entry as dangerous", record.category.value)
            raise IntakeRejectedError(status)
        self.add_record(record)
        return status

    def validate_intake(
        self, calories: int | None = None, water: float | None = None
    ) -> IntakeStatus:
        """Classify what today's totals would become after an addition."""
        totals = self.today_totals
        if calories is not None:
            new_total = totals.calories + calories
            ratio = new_total / self._targets.calorie_target
            if new_total > DANGEROUS_CALORIE_TOTAL:
                return IntakeStatus.DANGEROUS
            if ratio >= EXCESSIVE_RATIO:
                return IntakeStatus.EXCESSIVE
            if ratio >= TARGET_RATIO:
                return IntakeStatus.TARGET_REACHED

        if water is not None:
            ratio = _round_litres(totals.water + water) / self._targets.water_target
            if ratio >= DANGEROUS_WATER_RATIO:
                return IntakeStatus.DANGEROUS
            if ratio >= EXCESSIVE_RATIO:
                return IntakeStatus.EXCESSIVE
            if ratio >= TARGET_RATIO:
                return IntakeStatus.TARGET_REACHED

        return IntakeStatus.NORMAL

    def health_status(self) -> HealthStatus:
        """Label today's balance of calories and water."""
        calories_met = self.calorie_progress >= TARGET_RATIO
        water_met = self.water_progress >= TARGET_RATIO
        if calories_met and water_met:
            return HealthStatus.EXCELLENT
        if calories_met:
            return HealthStatus.NEEDS_WATER
        if water_met:
            return HealthStatus.NEEDS_CALORIES
        return HealthStatus.NORMAL

    def average_daily_calories(self) -> int:
        """Average calories over days with records in the last 30 days."""
        now = self.now()
        since = now - timedelta(days=AVERAGE_WINDOW_DAYS)
        per_day: dict[date, int] = {}
        for record in self.records.get_records(since, now + timedelta(days=1)):
            day = self._local_day(record.timestamp)
            per_day[day] = per_day.get(day, 0) + record.calories
        if not per_day:
            return 0
        return sum(per_day.values()) // len(per_day)

    def previous_day_calories(self) -> int:
        """Calories logged yesterday."""
        return self.totals_for(self.today() - timedelta(days=1)).calories

    def records_for(self, day: date) -> list[ConsumptionRecord]:
        """Return the records of one local day, newest first."""
        start, end = self._day_bounds(day)
        return self.records.get_records(start, end)

    def totals_for(self, day: date) -> DailyTotals:
        """Sum the records of one local day."""
        calories = 0
        water = 0.0
        for record in self.records_for(day):
            record_calories, record_water = record.contribution
            calories += record_calories
            water += record_water
        return DailyTotals(day=day, calories=calories, water=_round_litres(water))

    def week_overview(self) -> list[WeekdayTotals]:
        """Totals for the last seven days, oldest first."""
        today = self.today()
        overview = []
        for offset in range(WEEK_DAYS - 1, -1, -1):
            totals = self.totals_for(today - timedelta(days=offset))
            overview.append(
                WeekdayTotals(
                    day=totals.day,
                    label=totals.day.strftime("%a"),
                    calories=totals.calories,
                    water=totals.water,
                )
            )
        return overview

    def summary(self) -> DaySummary:
        """Build the read model for the summary screen."""
        totals = self.today_totals
        return DaySummary(
            totals=totals,
            targets=self._targets,
            calorie_progress=self.calorie_progress,
            water_progress=self.water_progress,
            health_status=self.health_status(),
            is_over_calorie_target=self.is_over_calorie_target,
            previous_day_calories=self.previous_day_calories(),
            average_daily_calories=self.average_daily_calories(),
            records=self.records_for(totals.day),
            week=self.week_overview(),
        )

    def reset_daily(self) -> None:
        """Delete today's records and zero the running totals."""
        today = self.today()
        start, end = self._day_bounds(today)
        self.records.clear_records(start, end)
        self._totals = DailyTotals(day=today)
        _logger.info("Daily data reset for %s", today.isoformat())

    def update_water_target(self, value: float) -> None:
        """Change and persist the water target."""
        self.target_settings.save_water_target(value)
        self._targets = replace(self._targets, water_target=float(value))

    def update_calorie_target(self, value: int) -> None:
        """Change and persist the calorie target."""
        self.target_settings.save_calorie_target(value)
        self._targets = replace(self._targets, calorie_target=int(value))

    def _ensure_current_day(self) -> None:
        if self._totals.day != self.today():
            self.refresh()

    def _emit_crossings(self, before: DailyTotals, after: DailyTotals) -> None:
        events = []
        calorie_target = self._targets.calorie_target
        if before.calories < calorie_target <= after.calories:
            events.append(
                TargetReached(TargetKind.CALORIES, after.calories, calorie_target)
            )
        water_target = self._targets.water_target
        if before.water < water_target <= after.water:
            events.append(TargetReached(TargetKind.WATER, after.water, water_target))
        for event in events:
            _logger.info("%s target reached: %s", event.kind.value, event.total)
            for listener in self._listeners:
                listener(event)

    def _day_bounds(self, day: date) -> tuple[datetime, datetime]:
        start = datetime.combine(day, time.min, tzinfo=self.timezone)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=self.timezone)
        return start, end

    def _local_day(self, timestamp: datetime) -> date:
        return timestamp.astimezone(self.timezone).date()


def _round_litres(value: float) -> float:
    return round(value, 3)

"""Domain models for consumption records."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4


class MealCategory(str, Enum):
    """Kind of consumption event."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DRINK = "drink"


@dataclass(frozen=True)
class ConsumptionRecord:
    """A single logged meal or drink."""

    category: MealCategory
    calories: int
    timestamp: datetime
    water_amount: float | None = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.calories < 0:
            raise ValueError("calories must be non-negative")
        if self.category is MealCategory.DRINK:
            if self.water_amount is None or self.water_amount < 0:
                raise ValueError("drink records need a non-negative water amount")
            if self.calories != 0:
                raise ValueError("drink records carry no calories")
        elif self.water_amount is not None:
            raise ValueError("only drink records carry a water amount")

    @classmethod
    def meal(
        cls,
        category: MealCategory,
        calories: int,
        timestamp: datetime | None = None,
    ) -> "ConsumptionRecord":
        """Create a meal record stamped now unless a timestamp is given."""
        return cls(
            category=category,
            calories=calories,
            timestamp=timestamp or datetime.now(tz=UTC),
        )

    @classmethod
    def drink(
        cls, water_amount: float, timestamp: datetime | None = None
    ) -> "ConsumptionRecord":
        """Create a water record stamped now unless a timestamp is given."""
        return cls(
            category=MealCategory.DRINK,
            calories=0,
            water_amount=water_amount,
            timestamp=timestamp or datetime.now(tz=UTC),
        )

    @property
    def contribution(self) -> tuple[int, float]:
        """Calories and litres this record adds to a daily total."""
        return self.calories, self.water_amount or 0.0

"""Day-bucketed lookups over meals and weight history."""

from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date, timedelta
from zoneinfo import ZoneInfo

from nutri_coach.domain.meals import Meal
from nutri_coach.domain.weights import WeightEntry
from nutri_coach.services.aggregation import local_day


@dataclass
class DayHistoryIndex:
    """Answers which records belong to a day, bounded by today."""

    meals: list[Meal]
    weights: list[WeightEntry]
    initial_weight_kg: float
    today: date
    tz: ZoneInfo | None = None
    _weight_days: list[date] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.weights = sorted(self.weights, key=lambda entry: entry.day)
        self._weight_days = [entry.day for entry in self.weights]

    def meals_on_day(self, day: date) -> list[Meal]:
        """Return meals logged on the given calendar day, in log order."""
        return [
            meal for meal in self.meals if local_day(meal.logged_at, self.tz) == day
        ]

    def latest_weight_as_of(self, day: date) -> float:
        """Return the last recorded weight at or before the day."""
        index = bisect_right(self._weight_days, day)
        if index == 0:
            return self.initial_weight_kg
        return self.weights[index - 1].weight_kg

    def weight_change(self, day: date) -> float:
        """Return the change from the initial weight as of the day."""
        return self.latest_weight_as_of(day) - self.initial_weight_kg

    def navigate(self, current: date, offset: int) -> date:
        """Move by a day offset without going past today."""
        return min(current + timedelta(days=offset), self.today)

    def can_go_forward(self, current: date) -> bool:
        """Return True when a later day is still reachable."""
        return current < self.today

    def day_title(self, day: date) -> str:
        """Return the heading for a day's meal list."""
        if day == self.today:
            return "Today's meals"
        if day == self.today - timedelta(days=1):
            return "Yesterday's meals"
        return f"Meals of {day:%d/%m}"

"""Domain models for dashboard statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DaySeriesPoint:
    """Calories logged on a single day of a trend series."""

    day: date
    label: str
    calories: float
    over_goal: bool = False


@dataclass(frozen=True)
class NutrientProgress:
    """Current intake against a goal."""

    name: str
    current: float
    goal: float
    unit: str
    percentage: float
    warning: bool = False

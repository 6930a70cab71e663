"""Trailing calorie series for trend charts."""

from collections.abc import Iterable
from datetime import date, timedelta
from zoneinfo import ZoneInfo

from nutri_coach.domain.meals import Meal
from nutri_coach.domain.stats import DaySeriesPoint
from nutri_coach.services.aggregation import aggregate_by_day, local_day

WINDOW_DAYS = 7
_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def build_trailing_week(
    meals: Iterable[Meal],
    reference_day: date,
    daily_goal: float | None = None,
    tz: ZoneInfo | None = None,
) -> list[DaySeriesPoint]:
    """Return calories for the 7 days ending on the reference day, oldest first."""
    start = reference_day - timedelta(days=WINDOW_DAYS - 1)
    window = [
        meal
        for meal in meals
        if start <= local_day(meal.logged_at, tz) <= reference_day
    ]
    totals = aggregate_by_day(window, tz)
    series: list[DaySeriesPoint] = []
    for offset in range(WINDOW_DAYS):
        day = start + timedelta(days=offset)
        day_totals = totals.get(day)
        calories = day_totals.calories if day_totals else 0.0
        series.append(
            DaySeriesPoint(
                day=day,
                label=_WEEKDAY_LABELS[day.weekday()],
                calories=calories,
                over_goal=daily_goal is not None and calories > daily_goal,
            )
        )
    return series

"""Tests for the day history index."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from nutri_coach.domain.weights import WeightEntry
from nutri_coach.services.history import DayHistoryIndex
from tests.conftest import make_meal

TODAY = date(2026, 3, 12)


def _index(tz: ZoneInfo | None = None) -> DayHistoryIndex:
    return DayHistoryIndex(
        meals=[
            make_meal("breakfast", datetime(2026, 3, 12, 7, 0, tzinfo=UTC), 300),
            make_meal("dinner", datetime(2026, 3, 11, 19, 0, tzinfo=UTC), 700),
            make_meal("late snack", datetime(2026, 3, 11, 23, 30, tzinfo=UTC), 150),
        ],
        weights=[
            WeightEntry(day=date(2026, 3, 10), weight_kg=60.5),
            WeightEntry(day=date(2026, 3, 1), weight_kg=61.0),
        ],
        initial_weight_kg=62.0,
        today=TODAY,
        tz=tz,
    )


def test_meals_on_day_filters_by_calendar_day() -> None:
    index = _index()

    names = [meal.name for meal in index.meals_on_day(date(2026, 3, 11))]

    assert names == ["dinner", "late snack"]
    assert index.meals_on_day(date(2026, 3, 9)) == []


def test_meals_on_day_uses_configured_timezone() -> None:
    index = _index(ZoneInfo("Europe/Rome"))

    names = [meal.name for meal in index.meals_on_day(TODAY)]

    assert names == ["breakfast", "late snack"]


def test_latest_weight_as_of_picks_most_recent_entry() -> None:
    index = _index()

    assert index.latest_weight_as_of(date(2026, 3, 5)) == 61.0
    assert index.latest_weight_as_of(date(2026, 3, 10)) == 60.5
    assert index.latest_weight_as_of(TODAY) == 60.5


def test_latest_weight_falls_back_to_initial_weight() -> None:
    index = _index()

    assert index.latest_weight_as_of(date(2026, 2, 27)) == 62.0
    assert index.weight_change(TODAY) == -1.5


def test_navigate_never_passes_today() -> None:
    index = _index()

    assert index.navigate(TODAY, 1) == TODAY
    assert index.navigate(TODAY, -1) == date(2026, 3, 11)
    assert index.navigate(date(2026, 3, 11), 1) == TODAY
    assert not index.can_go_forward(TODAY)
    assert index.can_go_forward(date(2026, 3, 11))


def test_navigate_from_future_day_lands_on_today() -> None:
    index = _index()

    assert index.navigate(date(2026, 3, 17), -1) == TODAY
    assert index.navigate(date(2026, 3, 17), 1) == TODAY


def test_day_title() -> None:
    index = _index()

    assert index.day_title(TODAY) == "Today's meals"
    assert index.day_title(date(2026, 3, 11)) == "Yesterday's meals"
    assert index.day_title(date(2026, 3, 2)) == "Meals of 02/03"

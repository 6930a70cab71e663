"""Dashboard view assembly for a selected day."""

from dataclasses import dataclass
from datetime import date

from nutri_coach.domain.meals import Meal
from nutri_coach.domain.nutrition import Micronutrient, NutrientTotals
from nutri_coach.domain.stats import DaySeriesPoint, NutrientProgress
from nutri_coach.services.aggregation import aggregate
from nutri_coach.services.session import TrackerSession
from nutri_coach.services.weekly import build_trailing_week

SODIUM = "sodium"


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard renders for one day."""

    day: date
    title: str
    is_today: bool
    can_go_forward: bool
    meals: list[Meal]
    totals: NutrientTotals
    calories: NutrientProgress
    macros: list[NutrientProgress]
    micronutrients: list[NutrientProgress]
    latest_weight_kg: float
    weight_change_kg: float
    weekly: list[DaySeriesPoint]


@dataclass
class DashboardService:
    """Combines goals, day totals and trends into a dashboard view."""

    def build(self, session: TrackerSession, day: date | None = None) -> DashboardView:
        """Build the view for a day, clamped to today."""
        user = session.require_user()
        index = session.history()
        selected = min(day or index.today, index.today)
        day_meals = index.meals_on_day(selected)
        totals = aggregate(day_meals)
        goals = user.daily_goals
        return DashboardView(
            day=selected,
            title=index.day_title(selected),
            is_today=selected == index.today,
            can_go_forward=index.can_go_forward(selected),
            meals=list(reversed(day_meals)),
            totals=totals,
            calories=progress("Calories", totals.calories, goals.calories, "kcal"),
            macros=[
                progress("Protein", totals.protein_g, goals.protein_g, "g"),
                progress("Carbs", totals.carbs_g, goals.carbs_g, "g"),
                progress("Fat", totals.fat_g, goals.fat_g, "g"),
            ],
            micronutrients=micronutrient_progress(
                totals.micronutrients, goals.micronutrients
            ),
            latest_weight_kg=index.latest_weight_as_of(selected),
            weight_change_kg=index.weight_change(selected),
            weekly=build_trailing_week(
                session.meals, index.today, daily_goal=goals.calories, tz=session.tz
            ),
        )


def progress(name: str, current: float, goal: float, unit: str) -> NutrientProgress:
    """Return progress toward a goal, capped at 100%."""
    return NutrientProgress(
        name=name,
        current=current,
        goal=goal,
        unit=unit,
        percentage=percentage_of(current, goal),
    )


def micronutrient_progress(
    current: list[Micronutrient], goals: list[Micronutrient]
) -> list[NutrientProgress]:
    """Match intake to goals by case-insensitive name, in goal order."""
    by_name = {micro.name.lower(): micro for micro in current}
    rows: list[NutrientProgress] = []
    for goal in goals:
        intake = by_name.get(goal.name.lower())
        quantity = intake.quantity if intake else 0.0
        percentage = percentage_of(quantity, goal.quantity)
        rows.append(
            NutrientProgress(
                name=goal.name,
                current=quantity,
                goal=goal.quantity,
                unit=goal.unit,
                percentage=percentage,
                warning=goal.name.lower() == SODIUM and percentage >= 100,
            )
        )
    return rows


def percentage_of(current: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(current / goal * 100, 100.0)

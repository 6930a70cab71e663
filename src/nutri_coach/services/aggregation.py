"""Nutrient aggregation across logged meals."""

from collections.abc import Iterable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from nutri_coach.domain.meals import Meal
from nutri_coach.domain.nutrition import (
    Micronutrient,
    NutrientTotals,
    coerce_number,
)


def aggregate(meals: Iterable[Meal]) -> NutrientTotals:
    """Sum macros and merge micronutrients across meals.

    Micronutrients are merged by case-insensitive name and keep first-seen
    order. Values are never rounded here.
    """
    calories = 0.0
    protein_g = 0.0
    carbs_g = 0.0
    fat_g = 0.0
    merged: list[Micronutrient] = []
    positions: dict[str, int] = {}
    for meal in meals:
        nutrients = meal.nutrients
        calories += coerce_number(getattr(nutrients, "calories", None))
        protein_g += coerce_number(getattr(nutrients, "protein_g", None))
        carbs_g += coerce_number(getattr(nutrients, "carbs_g", None))
        fat_g += coerce_number(getattr(nutrients, "fat_g", None))
        for micro in getattr(nutrients, "micronutrients", None) or []:
            name = str(getattr(micro, "name", "") or "")
            if not name:
                continue
            quantity = coerce_number(getattr(micro, "quantity", None))
            key = name.lower()
            index = positions.get(key)
            if index is None:
                positions[key] = len(merged)
                merged.append(
                    Micronutrient(
                        name=name,
                        quantity=quantity,
                        unit=str(getattr(micro, "unit", "") or ""),
                    )
                )
                continue
            existing = merged[index]
            merged[index] = Micronutrient(
                name=existing.name,
                quantity=existing.quantity + quantity,
                unit=existing.unit,
            )
    return NutrientTotals(
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        micronutrients=merged,
    )


def aggregate_by_day(
    meals: Iterable[Meal], tz: ZoneInfo | None = None
) -> dict[date, NutrientTotals]:
    """Return per-day totals keyed by local calendar day."""
    buckets: dict[date, list[Meal]] = {}
    for meal in meals:
        buckets.setdefault(local_day(meal.logged_at, tz), []).append(meal)
    return {day: aggregate(day_meals) for day, day_meals in sorted(buckets.items())}


def local_day(moment: datetime, tz: ZoneInfo | None = None) -> date:
    """Return the calendar day of a timestamp in the app's time reference.

    Naive timestamps are already local and are used as-is.
    """
    if tz is not None and moment.tzinfo is not None:
        return moment.astimezone(tz).date()
    return moment.date()

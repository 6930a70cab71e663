"""Nutrition domain models."""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Micronutrient:
    """A vitamin or mineral tracked by name, quantity and unit."""

    name: str
    quantity: float
    unit: str


@dataclass(frozen=True)
class NutrientTargets:
    """Daily targets derived from a biometric profile."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
    micronutrients: list[Micronutrient] = field(default_factory=list)


@dataclass(frozen=True)
class NutrientTotals:
    """Nutrient snapshot of a meal or a sum of meals."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    micronutrients: list[Micronutrient] = field(default_factory=list)


def coerce_number(value: object) -> float:
    """Return a finite float for numeric-looking input, else 0."""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return 0.0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number

"""Weight history maintenance."""

import math
from datetime import date

from nutri_coach.domain.errors import WeightValidationError
from nutri_coach.domain.weights import WeightEntry


def record_weight(
    history: list[WeightEntry], day: date, weight_kg: float
) -> list[WeightEntry]:
    """Return a new history with the day's weight set.

    A second entry for the same day replaces the first. The result is sorted
    by day.
    """
    if isinstance(weight_kg, bool) or not isinstance(weight_kg, int | float):
        raise WeightValidationError("Weight must be a number")
    if not math.isfinite(weight_kg) or weight_kg <= 0:
        raise WeightValidationError("Weight must be greater than zero")
    entry = WeightEntry(day=day, weight_kg=float(weight_kg))
    updated = [existing for existing in history if existing.day != day]
    updated.append(entry)
    return sorted(updated, key=lambda item: item.day)

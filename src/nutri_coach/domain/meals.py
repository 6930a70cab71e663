"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from nutri_coach.domain.nutrition import NutrientTotals


class MealSource(Enum):
    """How a meal was captured."""

    IMAGE = "image"
    TEXT = "text"
    BARCODE = "barcode"


@dataclass(frozen=True)
class Meal:
    """A logged meal with its nutrient snapshot."""

    id: str
    name: str
    logged_at: datetime
    nutrients: NutrientTotals
    image_url: str | None = None
    image_mime_type: str | None = None
    description: str | None = None
    source: MealSource | None = None

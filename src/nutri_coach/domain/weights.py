"""Domain models for weight tracking."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeightEntry:
    """Body weight recorded for a calendar day."""

    day: date
    weight_kg: float

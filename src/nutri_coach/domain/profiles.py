"""Domain models for user profiles and goals."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from nutri_coach.domain.nutrition import NutrientTargets


class Gender(Enum):
    """Biological sex used by the BMR formula."""

    FEMALE = "female"
    MALE = "male"


class Goal(Enum):
    """Weight goal selected during onboarding."""

    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_MUSCLE = "gain_muscle"


class ActivityLevel(Enum):
    """Activity level with its TDEE multiplier."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"

    @property
    def multiplier(self) -> float:
        """Return the TDEE multiplier for this level."""
        match self:
            case ActivityLevel.SEDENTARY:
                return 1.2
            case ActivityLevel.LIGHT:
                return 1.375
            case ActivityLevel.MODERATE:
                return 1.55
            case ActivityLevel.ACTIVE:
                return 1.725
            case ActivityLevel.VERY_ACTIVE:
                return 1.9


@dataclass(frozen=True)
class BiometricProfile:
    """Biometric data captured at onboarding."""

    name: str
    age: int
    gender: Gender
    height_cm: float
    initial_weight_kg: float


@dataclass(frozen=True)
class UserRecord:
    """The single user of the app, with derived daily goals."""

    profile: BiometricProfile
    goal: Goal
    activity_level: ActivityLevel
    preferences: str
    daily_goals: NutrientTargets
    onboarding_complete: bool
    calibration_start: datetime

"""Tracker session holding the user, meals and weight history."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import uuid4
from zoneinfo import ZoneInfo

from nutri_coach.domain.coach import MealEstimate
from nutri_coach.domain.errors import ProfileValidationError
from nutri_coach.domain.meals import Meal, MealSource
from nutri_coach.domain.nutrition import Micronutrient, NutrientTotals
from nutri_coach.domain.profiles import (
    ActivityLevel,
    BiometricProfile,
    Goal,
    UserRecord,
)
from nutri_coach.domain.weights import WeightEntry
from nutri_coach.services.goals import compute_goals
from nutri_coach.services.history import DayHistoryIndex
from nutri_coach.services.weights import record_weight

_logger = logging.getLogger(__name__)


class TrackerRepository(Protocol):
    """Whole-collection persistence for the tracker state."""

    def load_user(self) -> UserRecord | None:
        """Return the stored user, if any."""

    def save_user(self, user: UserRecord | None) -> None:
        """Replace the stored user; None clears it."""

    def load_meals(self) -> list[Meal]:
        """Return all stored meals."""

    def save_meals(self, meals: list[Meal]) -> None:
        """Replace the stored meal list."""

    def load_weights(self) -> list[WeightEntry]:
        """Return the stored weight history."""

    def save_weights(self, weights: list[WeightEntry]) -> None:
        """Replace the stored weight history."""


@dataclass
class TrackerSession:
    """Explicit session state; every mutation is persisted immediately."""

    repository: TrackerRepository
    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))
    user: UserRecord | None = None
    meals: list[Meal] = field(default_factory=list)
    weights: list[WeightEntry] = field(default_factory=list)
    loaded: bool = False

    def load(self) -> "TrackerSession":
        """Populate the session from the repository."""
        self.user = self.repository.load_user()
        self.meals = self.repository.load_meals()
        self.weights = sorted(self.repository.load_weights(), key=lambda e: e.day)
        self.loaded = True
        _logger.info(
            "Session loaded: user=%s meals=%s weights=%s",
            self.user is not None,
            len(self.meals),
            len(self.weights),
        )
        return self

    def ensure_loaded(self) -> "TrackerSession":
        """Load from the repository once."""
        if not self.loaded:
            self.load()
        return self

    def now(self) -> datetime:
        """Return the current time in the session timezone."""
        return self.clock().astimezone(self.tz)

    def today(self) -> date:
        """Return the current local calendar day."""
        return self.now().date()

    @property
    def is_onboarded(self) -> bool:
        """Return True when a completed user record exists."""
        return self.user is not None and self.user.onboarding_complete

    def require_user(self) -> UserRecord:
        """Return the user or raise if onboarding has not happened."""
        if self.user is None:
            raise ProfileValidationError("Onboarding has not been completed")
        return self.user

    def onboard(
        self,
        profile: BiometricProfile,
        goal: Goal,
        activity_level: ActivityLevel,
        preferences: str = "",
    ) -> UserRecord:
        """Create the user record and seed the weight history."""
        validate_profile(profile)
        now = self.now()
        user = UserRecord(
            profile=profile,
            goal=goal,
            activity_level=activity_level,
            preferences=preferences,
            daily_goals=compute_goals(profile, goal, activity_level),
            onboarding_complete=True,
            calibration_start=now,
        )
        self.user = user
        self.weights = [
            WeightEntry(day=now.date(), weight_kg=profile.initial_weight_kg)
        ]
        self.repository.save_user(user)
        self.repository.save_weights(self.weights)
        _logger.info(
            "User onboarded: goal=%s activity=%s", goal.value, activity_level.value
        )
        return user

    def update_profile(
        self,
        profile: BiometricProfile,
        goal: Goal,
        activity_level: ActivityLevel,
        preferences: str,
    ) -> UserRecord:
        """Replace the profile and recompute goals from scratch."""
        current = self.require_user()
        validate_profile(profile)
        user = UserRecord(
            profile=profile,
            goal=goal,
            activity_level=activity_level,
            preferences=preferences,
            daily_goals=compute_goals(profile, goal, activity_level),
            onboarding_complete=current.onboarding_complete,
            calibration_start=current.calibration_start,
        )
        self.user = user
        self.repository.save_user(user)
        return user

    def reset(self) -> None:
        """Forget the user; meals and weights are kept."""
        self.user = None
        self.repository.save_user(None)

    def add_meal(self, meal: Meal) -> Meal:
        """Append a meal and persist the meal list."""
        self.meals = [*self.meals, meal]
        self.repository.save_meals(self.meals)
        return meal

    def log_estimate(
        self,
        estimate: MealEstimate,
        source: MealSource,
        image_url: str | None = None,
        image_mime_type: str | None = None,
    ) -> Meal:
        """Turn a collaborator estimate into a logged meal."""
        meal = meal_from_estimate(
            estimate,
            logged_at=self.now(),
            source=source,
            image_url=image_url or estimate.image_url,
            image_mime_type=image_mime_type,
        )
        return self.add_meal(meal)

    def delete_meal(self, meal_id: str) -> bool:
        """Remove a meal by id; unknown ids are ignored."""
        remaining = [meal for meal in self.meals if meal.id != meal_id]
        if len(remaining) == len(self.meals):
            return False
        self.meals = remaining
        self.repository.save_meals(self.meals)
        return True

    def add_weight(
        self, weight_kg: float, day: date | None = None
    ) -> list[WeightEntry]:
        """Record today's weight, replacing any same-day entry."""
        self.weights = record_weight(self.weights, day or self.today(), weight_kg)
        self.repository.save_weights(self.weights)
        return self.weights

    def history(self) -> DayHistoryIndex:
        """Return a day index over the current collections."""
        initial = self.user.profile.initial_weight_kg if self.user else 0.0
        return DayHistoryIndex(
            meals=self.meals,
            weights=self.weights,
            initial_weight_kg=initial,
            today=self.today(),
            tz=self.tz,
        )


def validate_profile(profile: BiometricProfile) -> None:
    """Raise ProfileValidationError for missing or non-positive biometrics."""
    if not profile.name or not profile.name.strip():
        raise ProfileValidationError("Name is required")
    for label, value in (
        ("age", profile.age),
        ("height", profile.height_cm),
        ("initial weight", profile.initial_weight_kg),
    ):
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ProfileValidationError(f"{label.capitalize()} must be a number")
        if not math.isfinite(value) or value <= 0:
            raise ProfileValidationError(f"{label.capitalize()} must be positive")


def meal_from_estimate(
    estimate: MealEstimate,
    *,
    logged_at: datetime,
    source: MealSource,
    image_url: str | None = None,
    image_mime_type: str | None = None,
) -> Meal:
    """Build a meal from a nutrient estimate."""
    return Meal(
        id=str(uuid4()),
        name=estimate.name,
        logged_at=logged_at,
        nutrients=NutrientTotals(
            calories=estimate.calories,
            protein_g=estimate.protein_g,
            carbs_g=estimate.carbs_g,
            fat_g=estimate.fat_g,
            micronutrients=[
                Micronutrient(name=micro.name, quantity=micro.quantity, unit=micro.unit)
                for micro in estimate.micronutrients
            ],
        ),
        image_url=image_url,
        image_mime_type=image_mime_type,
        description=estimate.description,
        source=source,
    )

"""Supabase-backed whole-collection state repository."""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from nutri_coach.domain.meals import Meal, MealSource
from nutri_coach.domain.nutrition import (
    Micronutrient,
    NutrientTargets,
    NutrientTotals,
    coerce_number,
)
from nutri_coach.domain.profiles import (
    ActivityLevel,
    BiometricProfile,
    Gender,
    Goal,
    UserRecord,
)
from nutri_coach.domain.weights import WeightEntry
from nutri_coach.services.session import TrackerRepository

USER_KEY = "user"
MEALS_KEY = "meals"
WEIGHTS_KEY = "weight_history"

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseStateRepository(TrackerRepository):
    """Stores each collection as one JSON value under a fixed key."""

    client: Client
    key_prefix: str = "nutricoach"
    table: str = "app_state"

    def load_user(self) -> UserRecord | None:
        """Return the stored user, if any."""
        payload = self._load(USER_KEY)
        if payload is None:
            return None
        try:
            return parse_user(payload)
        except (KeyError, TypeError, ValueError) as exc:
            _logger.warning("Failed to parse stored user: %s", exc)
            return None

    def save_user(self, user: UserRecord | None) -> None:
        """Replace the stored user."""
        if user is None:
            self.client.table(self.table).delete().eq(
                "key", self._key(USER_KEY)
            ).execute()
            return
        self._save(USER_KEY, user_to_payload(user))

    def load_meals(self) -> list[Meal]:
        """Return stored meals, skipping unreadable records."""
        payload = self._load(MEALS_KEY)
        if not isinstance(payload, list):
            return []
        meals: list[Meal] = []
        for row in payload:
            try:
                meals.append(parse_meal(row))
            except (KeyError, TypeError, ValueError) as exc:
                _logger.warning("Skipping unreadable meal record: %s", exc)
        return meals

    def save_meals(self, meals: list[Meal]) -> None:
        """Replace the stored meal list."""
        self._save(MEALS_KEY, [meal_to_payload(meal) for meal in meals])

    def load_weights(self) -> list[WeightEntry]:
        """Return the stored weight history sorted by day."""
        payload = self._load(WEIGHTS_KEY)
        if not isinstance(payload, list):
            return []
        entries: list[WeightEntry] = []
        for row in payload:
            try:
                entries.append(
                    WeightEntry(
                        day=date.fromisoformat(row["date"]),
                        weight_kg=float(row["weight"]),
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                _logger.warning("Skipping unreadable weight record: %s", exc)
        return sorted(entries, key=lambda entry: entry.day)

    def save_weights(self, weights: list[WeightEntry]) -> None:
        """Replace the stored weight history."""
        self._save(
            WEIGHTS_KEY,
            [
                {"date": entry.day.isoformat(), "weight": entry.weight_kg}
                for entry in weights
            ],
        )

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}_{name}"

    def _load(self, name: str) -> object | None:
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", self._key(name))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def _save(self, name: str, value: object) -> None:
        self.client.table(self.table).upsert(
            {"key": self._key(name), "value": value}
        ).execute()


def user_to_payload(user: UserRecord) -> dict[str, object]:
    """Serialize a user record to JSON-compatible data."""
    profile = user.profile
    return {
        "profile": {
            "name": profile.name,
            "age": profile.age,
            "gender": profile.gender.value,
            "height": profile.height_cm,
            "initialWeight": profile.initial_weight_kg,
        },
        "goal": user.goal.value,
        "activityLevel": user.activity_level.value,
        "preferences": user.preferences,
        "dailyGoals": {
            "calories": user.daily_goals.calories,
            "protein": user.daily_goals.protein_g,
            "carbs": user.daily_goals.carbs_g,
            "fat": user.daily_goals.fat_g,
            "micronutrients": _micros_to_payload(user.daily_goals.micronutrients),
        },
        "onboardingComplete": user.onboarding_complete,
        "calibrationStartDate": user.calibration_start.isoformat(),
    }


def parse_user(payload: object) -> UserRecord:
    """Parse a stored user record."""
    if not isinstance(payload, dict):
        raise TypeError("user payload must be an object")
    profile = payload["profile"]
    goals = payload["dailyGoals"]
    return UserRecord(
        profile=BiometricProfile(
            name=str(profile["name"]),
            age=int(profile["age"]),
            gender=Gender(profile["gender"]),
            height_cm=float(profile["height"]),
            initial_weight_kg=float(profile["initialWeight"]),
        ),
        goal=Goal(payload["goal"]),
        activity_level=ActivityLevel(payload["activityLevel"]),
        preferences=str(payload.get("preferences") or ""),
        daily_goals=NutrientTargets(
            calories=int(goals["calories"]),
            protein_g=int(goals["protein"]),
            carbs_g=int(goals["carbs"]),
            fat_g=int(goals["fat"]),
            micronutrients=_parse_micros(goals.get("micronutrients")),
        ),
        onboarding_complete=bool(payload.get("onboardingComplete", False)),
        calibration_start=datetime.fromisoformat(payload["calibrationStartDate"]),
    )


def meal_to_payload(meal: Meal) -> dict[str, object]:
    """Serialize a meal to JSON-compatible data."""
    return {
        "id": meal.id,
        "name": meal.name,
        "timestamp": meal.logged_at.isoformat(),
        "nutrients": {
            "calories": meal.nutrients.calories,
            "protein": meal.nutrients.protein_g,
            "carbs": meal.nutrients.carbs_g,
            "fat": meal.nutrients.fat_g,
            "micronutrients": _micros_to_payload(meal.nutrients.micronutrients),
        },
        "imageUrl": meal.image_url,
        "imageMimeType": meal.image_mime_type,
        "description": meal.description,
        "source": meal.source.value if meal.source else None,
    }


def parse_meal(row: object) -> Meal:
    """Parse a stored meal; bad nutrient numbers read as zero."""
    if not isinstance(row, dict):
        raise TypeError("meal payload must be an object")
    nutrients = row.get("nutrients")
    if not isinstance(nutrients, dict):
        nutrients = {}
    return Meal(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        logged_at=datetime.fromisoformat(row["timestamp"]),
        nutrients=NutrientTotals(
            calories=coerce_number(nutrients.get("calories")),
            protein_g=coerce_number(nutrients.get("protein")),
            carbs_g=coerce_number(nutrients.get("carbs")),
            fat_g=coerce_number(nutrients.get("fat")),
            micronutrients=_parse_micros(nutrients.get("micronutrients")),
        ),
        image_url=row.get("imageUrl"),
        image_mime_type=row.get("imageMimeType"),
        description=row.get("description"),
        source=_parse_source(row.get("source")),
    )


def _micros_to_payload(micros: list[Micronutrient]) -> list[dict[str, object]]:
    return [
        {"name": micro.name, "quantity": micro.quantity, "unit": micro.unit}
        for micro in micros
    ]


def _parse_micros(raw: object) -> list[Micronutrient]:
    if not isinstance(raw, list):
        return []
    return [
        Micronutrient(
            name=str(item.get("name", "")),
            quantity=coerce_number(item.get("quantity")),
            unit=str(item.get("unit", "")),
        )
        for item in raw
        if isinstance(item, dict) and item.get("name")
    ]


def _parse_source(raw: object) -> MealSource | None:
    try:
        return MealSource(raw)
    except ValueError:
        return None

"""Daily nutrient goal calculation."""

import math

from nutri_coach.domain.nutrition import Micronutrient, NutrientTargets
from nutri_coach.domain.profiles import ActivityLevel, BiometricProfile, Gender, Goal

GOAL_ADJUSTMENT_KCAL = 500
PROTEIN_SHARE = 0.30
FAT_SHARE = 0.25
CARBS_SHARE = 0.45
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def compute_goals(
    profile: BiometricProfile, goal: Goal, activity_level: ActivityLevel
) -> NutrientTargets:
    """Derive calorie, macro and micronutrient targets for a profile.

    Macros are split from the goal-adjusted calorie target, not from TDEE.
    Each output is rounded on its own, so the macro calories can drift a few
    kcal away from the rounded calorie target.
    """
    bmr = basal_metabolic_rate(profile)
    tdee = total_daily_energy_expenditure(bmr, activity_level)
    calorie_target = _adjust_for_goal(tdee, goal)
    protein_g = calorie_target * PROTEIN_SHARE / KCAL_PER_G_PROTEIN
    fat_g = calorie_target * FAT_SHARE / KCAL_PER_G_FAT
    carbs_g = calorie_target * CARBS_SHARE / KCAL_PER_G_CARBS
    return NutrientTargets(
        calories=_round_half_up(calorie_target),
        protein_g=_round_half_up(protein_g),
        carbs_g=_round_half_up(carbs_g),
        fat_g=_round_half_up(fat_g),
        micronutrients=micronutrient_targets(profile.gender),
    )


def basal_metabolic_rate(profile: BiometricProfile) -> float:
    """Return the Harris-Benedict BMR in kcal/day."""
    weight = profile.initial_weight_kg
    height = profile.height_cm
    age = profile.age
    match profile.gender:
        case Gender.MALE:
            return 88.362 + 13.397 * weight + 4.799 * height - 5.677 * age
        case Gender.FEMALE:
            return 447.593 + 9.247 * weight + 3.098 * height - 4.330 * age


def total_daily_energy_expenditure(
    bmr: float, activity_level: ActivityLevel
) -> float:
    """Scale BMR by the activity multiplier."""
    return bmr * activity_level.multiplier


def micronutrient_targets(gender: Gender) -> list[Micronutrient]:
    """Return the fixed micronutrient reference table."""
    match gender:
        case Gender.FEMALE:
            iron_mg = 18.0
        case Gender.MALE:
            iron_mg = 8.0
    return [
        Micronutrient("Calcium", 1000.0, "mg"),
        Micronutrient("Iron", iron_mg, "mg"),
        Micronutrient("Potassium", 3500.0, "mg"),
        Micronutrient("Sodium", 2300.0, "mg"),
        Micronutrient("Vitamin C", 90.0, "mg"),
        Micronutrient("Vitamin A", 900.0, "mcg"),
        Micronutrient("Vitamin D", 15.0, "mcg"),
    ]


def _adjust_for_goal(tdee: float, goal: Goal) -> float:
    match goal:
        case Goal.LOSE_WEIGHT:
            return tdee - GOAL_ADJUSTMENT_KCAL
        case Goal.GAIN_MUSCLE:
            return tdee + GOAL_ADJUSTMENT_KCAL
        case Goal.MAINTAIN_WEIGHT:
            return tdee


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

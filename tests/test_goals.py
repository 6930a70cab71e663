"""Tests for daily goal calculation."""

import pytest

from nutri_coach.domain.profiles import ActivityLevel, Gender, Goal
from nutri_coach.services.goals import (
    basal_metabolic_rate,
    compute_goals,
    total_daily_energy_expenditure,
)
from tests.conftest import make_profile


def test_compute_goals_female_maintain_moderate() -> None:
    profile = make_profile(
        age=30, gender=Gender.FEMALE, height_cm=165, initial_weight_kg=60
    )

    targets = compute_goals(profile, Goal.MAINTAIN_WEIGHT, ActivityLevel.MODERATE)

    assert basal_metabolic_rate(profile) == pytest.approx(1383.683)
    assert targets.calories == 2145
    assert targets.protein_g == 161
    assert targets.fat_g == 60
    assert targets.carbs_g == 241


def test_compute_goals_adjusts_calories_for_goal() -> None:
    profile = make_profile()

    maintain = compute_goals(profile, Goal.MAINTAIN_WEIGHT, ActivityLevel.MODERATE)
    lose = compute_goals(profile, Goal.LOSE_WEIGHT, ActivityLevel.MODERATE)
    gain = compute_goals(profile, Goal.GAIN_MUSCLE, ActivityLevel.MODERATE)

    assert lose.calories == maintain.calories - 500
    assert gain.calories == maintain.calories + 500
    assert lose.protein_g == 123
    assert gain.protein_g == 198


def test_compute_goals_is_deterministic() -> None:
    profile = make_profile(
        gender=Gender.MALE, age=45, height_cm=182, initial_weight_kg=88
    )

    first = compute_goals(profile, Goal.GAIN_MUSCLE, ActivityLevel.ACTIVE)
    second = compute_goals(profile, Goal.GAIN_MUSCLE, ActivityLevel.ACTIVE)

    assert first == second


@pytest.mark.parametrize("gender", list(Gender))
@pytest.mark.parametrize("goal", list(Goal))
@pytest.mark.parametrize("activity", list(ActivityLevel))
def test_macro_calories_match_target_within_rounding(
    gender: Gender, goal: Goal, activity: ActivityLevel
) -> None:
    profile = make_profile(gender=gender, age=38, height_cm=171, initial_weight_kg=73.4)

    targets = compute_goals(profile, goal, activity)

    macro_kcal = targets.protein_g * 4 + targets.fat_g * 9 + targets.carbs_g * 4
    assert abs(macro_kcal - targets.calories) <= 9


def test_iron_target_depends_on_gender() -> None:
    female = compute_goals(
        make_profile(gender=Gender.FEMALE), Goal.MAINTAIN_WEIGHT, ActivityLevel.LIGHT
    )
    male = compute_goals(
        make_profile(gender=Gender.MALE), Goal.MAINTAIN_WEIGHT, ActivityLevel.LIGHT
    )

    female_iron = {m.name: m.quantity for m in female.micronutrients}["Iron"]
    male_iron = {m.name: m.quantity for m in male.micronutrients}["Iron"]
    assert female_iron == 18
    assert male_iron == 8


def test_micronutrient_table_is_fixed() -> None:
    targets = compute_goals(make_profile(), Goal.LOSE_WEIGHT, ActivityLevel.SEDENTARY)

    assert [m.name for m in targets.micronutrients] == [
        "Calcium",
        "Iron",
        "Potassium",
        "Sodium",
        "Vitamin C",
        "Vitamin A",
        "Vitamin D",
    ]
    assert targets.micronutrients[5].unit == "mcg"


def test_male_bmr_and_activity_multiplier() -> None:
    profile = make_profile(gender=Gender.MALE)

    bmr = basal_metabolic_rate(profile)

    assert bmr == pytest.approx(1513.707)
    assert total_daily_energy_expenditure(bmr, ActivityLevel.VERY_ACTIVE) == (
        pytest.approx(bmr * 1.9)
    )

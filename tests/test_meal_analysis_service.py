"""Tests for the meal analysis service."""

import asyncio

import pytest

from nutri_coach.domain.errors import MealInputError
from nutri_coach.services.meal_analysis import MealAnalysisService, to_data_url
from tests.conftest import FakeMealAnalysisClient


def _service(client: FakeMealAnalysisClient) -> MealAnalysisService:
    return MealAnalysisService(
        client=client, model="gpt-5.2", reasoning_effort=None, store=False
    )


def test_analyze_text_returns_estimate() -> None:
    client = FakeMealAnalysisClient()

    estimate = asyncio.run(_service(client).analyze_text("chicken salad with oil"))

    assert estimate is not None
    assert estimate.name == "Chicken salad"
    assert estimate.calories == 420
    assert len(estimate.micronutrients) == 3
    assert "chicken salad with oil" in client.prompts[0]
    assert client.images == [None]


def test_analyze_image_sends_data_url_and_note() -> None:
    client = FakeMealAnalysisClient()
    png = b"\x89PNG\r\n\x1a\n" + b"pixels"

    estimate = asyncio.run(_service(client).analyze_image(png, note="half portion"))

    assert estimate is not None
    assert client.images[0].startswith("data:image/png;base64,")
    assert "half portion" in client.prompts[0]


def test_analysis_failure_returns_none() -> None:
    client = FakeMealAnalysisClient(error=RuntimeError("timeout"))

    assert asyncio.run(_service(client).analyze_text("pasta")) is None


def test_malformed_estimate_is_coerced_or_rejected() -> None:
    client = FakeMealAnalysisClient(
        payload={
            "name": "",
            "calories": "lots",
            "protein_g": "12",
            "carbs_g": "NaN",
            "fat_g": float("inf"),
            "micronutrients": None,
        }
    )

    estimate = asyncio.run(_service(client).analyze_text("mystery stew"))

    assert estimate is not None
    assert estimate.name == "Analyzed meal"
    assert estimate.description == "Description not available."
    assert estimate.calories == 0
    assert estimate.protein_g == 12
    assert estimate.carbs_g == 0
    assert estimate.fat_g == 0
    assert estimate.micronutrients == []

    client.payload = ["not", "an", "object"]  # type: ignore[assignment]
    assert asyncio.run(_service(client).analyze_text("mystery stew")) is None


def test_analysis_input_is_validated() -> None:
    service = _service(FakeMealAnalysisClient())

    with pytest.raises(MealInputError):
        asyncio.run(service.analyze_text("   "))
    with pytest.raises(MealInputError):
        asyncio.run(service.analyze_image(b""))


def test_to_data_url_prefers_explicit_mime_type() -> None:
    assert to_data_url(b"data", "image/heic").startswith("data:image/heic;base64,")
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")

"""Meal nutrient estimation using LLMs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutri_coach.domain.coach import MealEstimate
from nutri_coach.domain.errors import MealInputError

_logger = logging.getLogger(__name__)

MEAL_ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "Short descriptive name, e.g. 'Chicken salad'.",
        },
        "description": {
            "type": "string",
            "description": "Short description of the analyzed meal, 1-2 sentences.",
        },
        "calories": {"type": "number", "description": "Total kcal of the meal."},
        "protein_g": {"type": "number", "description": "Total protein in grams."},
        "carbs_g": {"type": "number", "description": "Total carbohydrates in grams."},
        "fat_g": {"type": "number", "description": "Total fat in grams."},
        "micronutrients": {
            "type": "array",
            "description": (
                "The 3-5 most significant vitamins and minerals in the meal. "
                "Only include those present in relevant amounts."
            ),
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "number"},
                    "unit": {"type": "string"},
                },
                "required": ["name", "quantity", "unit"],
                "additionalProperties": False,
            },
        },
    },
    "required": [
        "name",
        "description",
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "micronutrients",
    ],
    "additionalProperties": False,
}

_ESTIMATE_INSTRUCTIONS = (
    "Estimate the nutritional values (calories, protein, carbs, fat) and the "
    "main micronutrients. Also return a name for the dish and a short description."
)


class MealAnalysisClient(Protocol):
    """Interface for structured LLM extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured data matching the schema."""


@dataclass
class MealAnalysisService:
    """Builds analysis prompts and validates estimates.

    Collaborator failures yield None, never an exception.
    """

    client: MealAnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_image(
        self, image_bytes: bytes, mime_type: str | None = None, note: str = ""
    ) -> MealEstimate | None:
        """Estimate nutrients from a meal photo and an optional note."""
        if not image_bytes:
            raise MealInputError("Please upload or take a photo of your meal.")
        prompt = (
            "Analyze the image of this meal. If the user provides a description, "
            f'use it to improve the analysis. User description: "{note or "None"}". '
            + _ESTIMATE_INSTRUCTIONS
        )
        return await self._extract(
            prompt, image_data_url=to_data_url(image_bytes, mime_type)
        )

    async def analyze_text(self, description: str) -> MealEstimate | None:
        """Estimate nutrients from a free-text meal description."""
        if not description or not description.strip():
            raise MealInputError("Please describe your meal.")
        prompt = (
            f'Analyze this meal described by the user: "{description.strip()}". '
            + _ESTIMATE_INSTRUCTIONS
        )
        return await self._extract(prompt, image_data_url=None)

    async def _extract(
        self, prompt: str, *, image_data_url: str | None
    ) -> MealEstimate | None:
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=MEAL_ESTIMATE_SCHEMA,
                image_data_url=image_data_url,
            )
            return MealEstimate.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Meal analysis returned a malformed estimate: %s", exc)
            return None
        except Exception:
            _logger.exception("Meal analysis failed")
            return None


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"

"""Models for AI coaching and meal analysis results."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from nutri_coach.domain.nutrition import coerce_number


class ChatRole(Enum):
    """Author of a chat turn."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class ChatMessage:
    """Single turn of the coach conversation."""

    role: ChatRole
    text: str


class MicronutrientEstimate(BaseModel):
    """Micronutrient detected in an analyzed meal."""

    name: str
    quantity: float = 0.0
    unit: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: object) -> float:
        return coerce_number(value)


class MealEstimate(BaseModel):
    """Structured nutrient estimate for a meal."""

    name: str = "Analyzed meal"
    description: str = "Description not available."
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    micronutrients: list[MicronutrientEstimate] = Field(default_factory=list)
    image_url: str | None = None

    @field_validator("calories", "protein_g", "carbs_g", "fat_g", mode="before")
    @classmethod
    def _coerce_macro(cls, value: object) -> float:
        return coerce_number(value)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _blank_to_default(cls, value: object, info: ValidationInfo) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("micronutrients", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return value or []

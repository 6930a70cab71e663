"""Pydantic request and response models for the HTTP API."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from nutri_coach.domain.coach import ChatRole
from nutri_coach.domain.meals import MealSource
from nutri_coach.domain.profiles import ActivityLevel, Gender, Goal


class ProfilePayload(BaseModel):
    """Biometric profile payload."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    age: int
    gender: Gender
    height_cm: float
    initial_weight_kg: float


class ProfileRequest(BaseModel):
    """Onboarding or profile edit request."""

    profile: ProfilePayload
    goal: Goal
    activity_level: ActivityLevel
    preferences: str = ""


class MicronutrientPayload(BaseModel):
    """Micronutrient name, quantity and unit."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    quantity: float
    unit: str


class TargetsPayload(BaseModel):
    """Daily nutrient targets."""

    model_config = ConfigDict(from_attributes=True)

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
    micronutrients: list[MicronutrientPayload]


class UserResponse(BaseModel):
    """Stored user record."""

    model_config = ConfigDict(from_attributes=True)

    profile: ProfilePayload
    goal: Goal
    activity_level: ActivityLevel
    preferences: str
    daily_goals: TargetsPayload
    onboarding_complete: bool
    calibration_start: datetime


class TotalsPayload(BaseModel):
    """Nutrient totals for a meal or a day."""

    model_config = ConfigDict(from_attributes=True)

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    micronutrients: list[MicronutrientPayload]


class MealResponse(BaseModel):
    """Logged meal."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    logged_at: datetime
    nutrients: TotalsPayload
    image_url: str | None = None
    image_mime_type: str | None = None
    description: str | None = None
    source: MealSource | None = None


class EstimatePayload(BaseModel):
    """Nutrient estimate returned by analysis or barcode lookup."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    micronutrients: list[MicronutrientPayload]
    image_url: str | None = None


class AnalyzeMealRequest(BaseModel):
    """Meal analysis input: a photo with an optional note, or text alone."""

    image_base64: str | None = None
    image_mime_type: str | None = None
    description: str = ""
    save: bool = True


class BarcodeRequest(BaseModel):
    """Decoded barcode to look up."""

    barcode: str = Field(min_length=1)
    save: bool = True


class MealLogResponse(BaseModel):
    """Outcome of an analysis or lookup; message is set when nothing was found."""

    estimate: EstimatePayload | None = None
    meal: MealResponse | None = None
    message: str | None = None


class WeightRequest(BaseModel):
    """New weight for today."""

    weight_kg: float


class WeightPayload(BaseModel):
    """Weight history entry."""

    model_config = ConfigDict(from_attributes=True)

    day: date
    weight_kg: float


class ProgressPayload(BaseModel):
    """Intake against a goal."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    current: float
    goal: float
    unit: str
    percentage: float
    warning: bool


class SeriesPointPayload(BaseModel):
    """Calories for one day of the trend chart."""

    model_config = ConfigDict(from_attributes=True)

    day: date
    label: str
    calories: float
    over_goal: bool


class DashboardResponse(BaseModel):
    """Dashboard view for a selected day."""

    model_config = ConfigDict(from_attributes=True)

    day: date
    title: str
    is_today: bool
    can_go_forward: bool
    meals: list[MealResponse]
    totals: TotalsPayload
    calories: ProgressPayload
    macros: list[ProgressPayload]
    micronutrients: list[ProgressPayload]
    latest_weight_kg: float
    weight_change_kg: float
    weekly: list[SeriesPointPayload]


class NavigateResponse(BaseModel):
    """Result of moving the selected day."""

    day: date
    can_go_forward: bool


class ChatTurn(BaseModel):
    """Single chat transcript entry."""

    role: ChatRole
    text: str


class ChatRequest(BaseModel):
    """Chat turn with the prior transcript."""

    transcript: list[ChatTurn] = Field(default_factory=list)
    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """Coach reply."""

    reply: str


class AdviceResponse(BaseModel):
    """Coaching tip for today."""

    advice: str

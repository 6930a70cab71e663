"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from nutri_coach.api.models import (
    AdviceResponse,
    AnalyzeMealRequest,
    BarcodeRequest,
    ChatRequest,
    ChatResponse,
    DashboardResponse,
    EstimatePayload,
    MealLogResponse,
    MealResponse,
    NavigateResponse,
    ProfileRequest,
    SeriesPointPayload,
    UserResponse,
    WeightPayload,
    WeightRequest,
)
from nutri_coach.app_logging import configure_logging
from nutri_coach.containers import AppContainer
from nutri_coach.domain.coach import ChatMessage, MealEstimate
from nutri_coach.domain.errors import MealInputError, NutriCoachError
from nutri_coach.domain.meals import MealSource
from nutri_coach.domain.profiles import BiometricProfile
from nutri_coach.services.meal_analysis import to_data_url
from nutri_coach.services.session import TrackerSession
from nutri_coach.services.weekly import build_trailing_week

ANALYSIS_FAILED = "The meal could not be analyzed. Please try again."
PRODUCT_NOT_FOUND = (
    "Product not found in the database. Try logging it via photo or text."
)
UNPROCESSABLE_STATUS = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.session.ensure_loaded()
        except Exception:
            logger.exception("Failed to load tracker state")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutriCoachError)
    async def domain_error_handler(
        request: Request, exc: NutriCoachError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=UNPROCESSABLE_STATUS,
            content={"detail": str(exc)},
        )

    def _session(request: Request) -> TrackerSession:
        state_container: AppContainer = request.app.state.container
        return state_container.session.ensure_loaded()

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/onboarding")
    async def onboarding(payload: ProfileRequest, request: Request) -> UserResponse:
        """Create the user and derive daily goals."""
        user = _session(request).onboard(
            profile=BiometricProfile(**payload.profile.model_dump()),
            goal=payload.goal,
            activity_level=payload.activity_level,
            preferences=payload.preferences,
        )
        return UserResponse.model_validate(user)

    @app.get("/profile")
    async def get_profile(request: Request) -> UserResponse:
        """Return the user record."""
        return UserResponse.model_validate(_session(request).require_user())

    @app.put("/profile")
    async def update_profile(payload: ProfileRequest, request: Request) -> UserResponse:
        """Edit the profile; goals are recomputed."""
        user = _session(request).update_profile(
            profile=BiometricProfile(**payload.profile.model_dump()),
            goal=payload.goal,
            activity_level=payload.activity_level,
            preferences=payload.preferences,
        )
        return UserResponse.model_validate(user)

    @app.delete("/profile")
    async def reset_profile(request: Request) -> dict[str, bool]:
        """Forget the user so onboarding starts over; history is kept."""
        _session(request).reset()
        return {"reset": True}

    @app.get("/dashboard")
    async def dashboard(
        request: Request, day: date | None = None
    ) -> DashboardResponse:
        """Return the dashboard for a day (default today)."""
        state_container: AppContainer = request.app.state.container
        view = state_container.dashboard_service.build(_session(request), day)
        return DashboardResponse.model_validate(view)

    @app.get("/dashboard/navigate")
    async def navigate(
        request: Request, day: date, offset: int = Query(ge=-1, le=1)
    ) -> NavigateResponse:
        """Move the selected day by one, never past today."""
        index = _session(request).history()
        target = index.navigate(day, offset)
        return NavigateResponse(day=target, can_go_forward=index.can_go_forward(target))

    @app.get("/weekly")
    async def weekly(
        request: Request, day: date | None = None
    ) -> list[SeriesPointPayload]:
        """Return daily calories for the week ending on a day (default today)."""
        session = _session(request)
        user = session.require_user()
        reference = min(day or session.today(), session.today())
        series = build_trailing_week(
            session.meals,
            reference,
            daily_goal=user.daily_goals.calories,
            tz=session.tz,
        )
        return [SeriesPointPayload.model_validate(point) for point in series]

    @app.post("/meals/analyze")
    async def analyze_meal(
        payload: AnalyzeMealRequest, request: Request
    ) -> MealLogResponse:
        """Estimate a meal from a photo or text and log it."""
        state_container: AppContainer = request.app.state.container
        session = _session(request)
        if payload.save:
            session.require_user()
        service = state_container.meal_analysis_service
        image_url = None
        if payload.image_base64:
            image_bytes = _decode_image(payload.image_base64)
            estimate = await service.analyze_image(
                image_bytes, payload.image_mime_type, payload.description
            )
            source = MealSource.IMAGE
            image_url = to_data_url(image_bytes, payload.image_mime_type)
        else:
            estimate = await service.analyze_text(payload.description)
            source = MealSource.TEXT
        if estimate is None:
            return MealLogResponse(message=ANALYSIS_FAILED)
        return _log_response(
            session,
            estimate,
            source,
            save=payload.save,
            image_url=image_url,
            image_mime_type=payload.image_mime_type,
        )

    @app.post("/meals/barcode")
    async def barcode_meal(
        payload: BarcodeRequest, request: Request
    ) -> MealLogResponse:
        """Look up a barcode and log the product per 100g."""
        state_container: AppContainer = request.app.state.container
        session = _session(request)
        if payload.save:
            session.require_user()
        estimate = await state_container.product_lookup_service.lookup(payload.barcode)
        if estimate is None:
            return MealLogResponse(message=PRODUCT_NOT_FOUND)
        return _log_response(
            session, estimate, MealSource.BARCODE, save=payload.save
        )

    @app.delete("/meals/{meal_id}")
    async def delete_meal(meal_id: str, request: Request) -> dict[str, bool]:
        """Delete a meal by id."""
        return {"deleted": _session(request).delete_meal(meal_id)}

    @app.post("/weights")
    async def add_weight(
        payload: WeightRequest, request: Request
    ) -> list[WeightPayload]:
        """Record today's weight."""
        history = _session(request).add_weight(payload.weight_kg)
        return [WeightPayload.model_validate(entry) for entry in history]

    @app.get("/weights")
    async def list_weights(request: Request) -> list[WeightPayload]:
        """Return the weight history, oldest first."""
        return [
            WeightPayload.model_validate(entry) for entry in _session(request).weights
        ]

    @app.get("/coach/advice")
    async def coach_advice(request: Request) -> AdviceResponse:
        """Return a coaching tip based on today's meals."""
        state_container: AppContainer = request.app.state.container
        session = _session(request)
        user = session.require_user()
        meals_today = session.history().meals_on_day(session.today())
        advice = await state_container.coach_service.advice(user, meals_today)
        return AdviceResponse(advice=advice)

    @app.post("/coach/chat")
    async def coach_chat(payload: ChatRequest, request: Request) -> ChatResponse:
        """Send a chat message to the coach."""
        state_container: AppContainer = request.app.state.container
        user = _session(request).require_user()
        transcript = [
            ChatMessage(role=turn.role, text=turn.text) for turn in payload.transcript
        ]
        reply = await state_container.coach_service.chat(
            user, transcript, payload.message
        )
        return ChatResponse(reply=reply)

    return app


def _decode_image(raw: str) -> bytes:
    """Decode base64 image data, accepting a data URL prefix."""
    encoded = raw.split(",", 1)[1] if raw.startswith("data:") else raw
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MealInputError("Image data is not valid base64.") from exc


def _log_response(  # noqa: PLR0913
    session: TrackerSession,
    estimate: MealEstimate,
    source: MealSource,
    *,
    save: bool,
    image_url: str | None = None,
    image_mime_type: str | None = None,
) -> MealLogResponse:
    estimate_payload = EstimatePayload.model_validate(estimate.model_dump())
    if not save:
        return MealLogResponse(estimate=estimate_payload)
    meal = session.log_estimate(
        estimate, source, image_url=image_url, image_mime_type=image_mime_type
    )
    return MealLogResponse(
        estimate=estimate_payload, meal=MealResponse.model_validate(meal)
    )

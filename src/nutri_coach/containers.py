"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutri_coach.adapters.openai_coach_client import OpenAICoachClient
from nutri_coach.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutri_coach.adapters.supabase_state_repository import SupabaseStateRepository
from nutri_coach.config import Settings, parse_timezone
from nutri_coach.services.cache import InMemoryCache
from nutri_coach.services.coach import CoachService
from nutri_coach.services.dashboard import DashboardService
from nutri_coach.services.meal_analysis import MealAnalysisService
from nutri_coach.services.products import ProductLookupService
from nutri_coach.services.session import TrackerSession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session: TrackerSession
    meal_analysis_service: MealAnalysisService
    coach_service: CoachService
    product_lookup_service: ProductLookupService
    dashboard_service: DashboardService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    state_repository = SupabaseStateRepository(
        supabase_client, key_prefix=resolved_settings.state_key_prefix
    )
    session = TrackerSession(
        repository=state_repository,
        tz=parse_timezone(resolved_settings.timezone),
    )
    openai_client = OpenAICoachClient.create(resolved_settings.openai_api_key)
    meal_analysis_service = MealAnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    coach_service = CoachService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    product_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.openfoodfacts_base_url
    )
    product_lookup_service = ProductLookupService(
        client=product_client,
        cache=InMemoryCache(),
    )

    async def close_resources() -> None:
        await product_client.close()
        await openai_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        meal_analysis_service=meal_analysis_service,
        coach_service=coach_service,
        product_lookup_service=product_lookup_service,
        dashboard_service=DashboardService(),
        close_resources=close_resources,
    )

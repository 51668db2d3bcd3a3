"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from espresso_tracker.adapters.supabase_equipment_repository import (
    SupabaseBeanRepository,
    SupabaseGrinderConfigRepository,
)
from espresso_tracker.adapters.supabase_preference_store import (
    SupabasePreferenceStore,
)
from espresso_tracker.adapters.supabase_shot_repository import SupabaseShotRepository
from espresso_tracker.config import Settings
from espresso_tracker.services.recommendation_store import RecommendationStore
from espresso_tracker.services.recommendations import GrindRecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    grind_recommendation_service: GrindRecommendationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    preference_store = SupabasePreferenceStore(
        supabase_client, table_name=resolved_settings.preferences_table
    )
    grind_recommendation_service = GrindRecommendationService(
        shot_repository=SupabaseShotRepository(supabase_client),
        grinder_config_repository=SupabaseGrinderConfigRepository(supabase_client),
        bean_repository=SupabaseBeanRepository(supabase_client),
        store=RecommendationStore(
            preference_store, key_prefix=resolved_settings.recommendation_key_prefix
        ),
        default_dose=resolved_settings.default_dose,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        grind_recommendation_service=grind_recommendation_service,
        close_resources=close_resources,
    )

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pantry_shopping.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from pantry_shopping.adapters.supabase_reference_repository import (
    SupabaseReferenceDataRepository,
)
from pantry_shopping.adapters.supabase_shopping_session_repository import (
    SupabaseShoppingSessionRepository,
)
from pantry_shopping.config import Settings
from pantry_shopping.services.ingredients import IngredientService
from pantry_shopping.services.reference import ReferenceDataService
from pantry_shopping.services.shopping import ShoppingSessionService
from pantry_shopping.services.stats import ShoppingStatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    shopping_session_service: ShoppingSessionService
    shopping_stats_service: ShoppingStatsService
    ingredient_service: IngredientService
    reference_data_service: ReferenceDataService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseShoppingSessionRepository(supabase_client)
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    reference_repository = SupabaseReferenceDataRepository(supabase_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        shopping_session_service=ShoppingSessionService(
            session_repository=session_repository,
            ingredient_repository=ingredient_repository,
        ),
        shopping_stats_service=ShoppingStatsService(
            session_repository=session_repository,
            ingredient_repository=ingredient_repository,
        ),
        ingredient_service=IngredientService(
            repository=ingredient_repository,
            reference_repository=reference_repository,
        ),
        reference_data_service=ReferenceDataService(reference_repository),
        close_resources=close_resources,
    )

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from calorie_tracker.config import Settings
from calorie_tracker.services.calories import CalorieResolver
from calorie_tracker.services.entries import FoodLogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    calorie_resolver: CalorieResolver
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    calorie_resolver = CalorieResolver(
        fdc_client=fdc_client,
        fallback_calories=resolved_settings.fallback_calories,
        page_size=resolved_settings.fdc_page_size,
    )
    food_log_service = FoodLogService(
        resolver=calorie_resolver,
        repository=SupabaseFoodRepository(supabase_client),
        user_id=resolved_settings.default_user_id,
        timezone_name=resolved_settings.timezone,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        calorie_resolver=calorie_resolver,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )

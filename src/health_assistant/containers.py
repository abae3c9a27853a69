"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from health_assistant.adapters.openai_narrator_client import OpenAINarratorClient
from health_assistant.config import Settings, has_value
from health_assistant.services.catalog import MealCatalog, load_meal_catalog
from health_assistant.services.health import HealthToolsService
from health_assistant.services.metrics import MetricsService, MockMetricSource
from health_assistant.services.narrator import (
    InsightNarrator,
    Narrator,
    UnconfiguredNarrator,
)
from health_assistant.services.recommendations import MealRecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_catalog: MealCatalog
    narrator: InsightNarrator
    metrics_service: MetricsService
    health_tools: HealthToolsService
    meal_recommendations: MealRecommendationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client: OpenAINarratorClient | None = None
    narrator_backend: Narrator
    if has_value(resolved_settings.openai_api_key):
        openai_client = OpenAINarratorClient.create(
            api_key=resolved_settings.openai_api_key or "",
            model=resolved_settings.openai_model,
        )
        narrator_backend = openai_client
    else:
        narrator_backend = UnconfiguredNarrator()
    narrator = InsightNarrator(
        narrator=narrator_backend,
        timeout_seconds=resolved_settings.narrator_timeout_seconds,
    )
    metrics_service = MetricsService(
        source=MockMetricSource(), fallback_source=MockMetricSource()
    )
    meal_catalog = load_meal_catalog(resolved_settings.meals_data_path)

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_catalog=meal_catalog,
        narrator=narrator,
        metrics_service=metrics_service,
        health_tools=HealthToolsService(metrics=metrics_service, narrator=narrator),
        meal_recommendations=MealRecommendationService(
            catalog=meal_catalog, narrator=narrator
        ),
        close_resources=close_resources,
    )

"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from health_assistant.config import Settings
from health_assistant.containers import AppContainer
from health_assistant.domain.errors import NarratorError
from health_assistant.domain.health import (
    METRIC_UNITS,
    HealthMetric,
    MetricKind,
    MetricSeries,
)
from health_assistant.services.catalog import MealCatalog, fallback_meal_catalog
from health_assistant.services.health import HealthToolsService
from health_assistant.services.metrics import MetricSource, MetricsService
from health_assistant.services.narrator import InsightNarrator, Narrator
from health_assistant.services.recommendations import MealRecommendationService

FIXED_NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_series(
    kind: MetricKind, values: list[float], end: datetime = FIXED_NOW
) -> MetricSeries:
    """Build a daily series ending at ``end``, oldest first."""
    series: MetricSeries = []
    for index, value in enumerate(values):
        timestamp = end - timedelta(days=len(values) - 1 - index)
        series.append(
            HealthMetric(
                kind=kind,
                value=value,
                unit=METRIC_UNITS[kind],
                observed_at=timestamp.date(),
                timestamp=timestamp,
            )
        )
    return series


@dataclass
class FakeNarrator(Narrator):
    """Narrator that records prompts and returns a fixed reply."""

    reply: str = "Great choices for your goals."
    prompts: list[str] = field(default_factory=list)
    system_prompts: list[str | None] = field(default_factory=list)

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        self.prompts.append(prompt)
        self.system_prompts.append(system_prompt)
        return self.reply


@dataclass
class FailingNarrator(Narrator):
    """Narrator that always raises."""

    error: Exception = field(default_factory=lambda: NarratorError("boom"))
    calls: int = 0

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        self.calls += 1
        raise self.error


@dataclass
class SlowNarrator(Narrator):
    """Narrator that takes longer than any test timeout."""

    delay_seconds: float = 5.0

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        await asyncio.sleep(self.delay_seconds)
        return "too late"


@dataclass
class FixedMetricSource(MetricSource):
    """Metric source returning the same value for every day of a window."""

    values: dict[MetricKind, float] = field(
        default_factory=lambda: {
            MetricKind.STEPS: 10000,
            MetricKind.CALORIES: 2000,
            MetricKind.HEART_RATE: 70,
            MetricKind.SLEEP: 7.5,
            MetricKind.WEIGHT: 72.4,
        }
    )
    previous_values: dict[MetricKind, float] | None = None
    calls: list[tuple[MetricKind, int, int]] = field(default_factory=list)

    async def fetch(
        self, kind: MetricKind, days: int, offset_days: int = 0
    ) -> MetricSeries:
        self.calls.append((kind, days, offset_days))
        values = self.values
        if offset_days and self.previous_values is not None:
            values = self.previous_values
        return make_series(
            kind,
            [values[kind]] * days,
            end=FIXED_NOW - timedelta(days=offset_days),
        )


@dataclass
class FailingMetricSource(MetricSource):
    """Metric source that always raises."""

    async def fetch(
        self, kind: MetricKind, days: int, offset_days: int = 0
    ) -> MetricSeries:
        raise ConnectionError("fitness API unreachable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key=None,
        meals_data_path=None,
        google_health_client_id=None,
    )


@pytest.fixture
def catalog() -> MealCatalog:
    return fallback_meal_catalog()


@pytest.fixture
def fake_narrator() -> FakeNarrator:
    return FakeNarrator()


@pytest.fixture
def metric_source() -> FixedMetricSource:
    return FixedMetricSource()


@pytest.fixture
def container(
    settings: Settings,
    catalog: MealCatalog,
    fake_narrator: FakeNarrator,
    metric_source: FixedMetricSource,
) -> AppContainer:
    narrator = InsightNarrator(narrator=fake_narrator, timeout_seconds=1.0)
    metrics_service = MetricsService(source=metric_source, clock=fixed_clock)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_catalog=catalog,
        narrator=narrator,
        metrics_service=metrics_service,
        health_tools=HealthToolsService(metrics=metrics_service, narrator=narrator),
        meal_recommendations=MealRecommendationService(
            catalog=catalog, narrator=narrator
        ),
        close_resources=close_resources,
    )

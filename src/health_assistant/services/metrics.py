"""Metric sources and the service that fetches series and snapshots."""

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from health_assistant.domain.errors import (
    InvalidArgumentError,
    UpstreamUnavailableError,
)
from health_assistant.domain.health import (
    METRIC_UNITS,
    HealthMetric,
    HealthSnapshot,
    MetricKind,
    MetricSeries,
)

MIN_DAYS = 1
MAX_DAYS = 365

_MOCK_RANGES: dict[MetricKind, tuple[float, float]] = {
    MetricKind.STEPS: (8000, 12000),
    MetricKind.CALORIES: (1800, 2200),
    MetricKind.HEART_RATE: (65, 85),
    MetricKind.SLEEP: (6.5, 8.5),
    MetricKind.WEIGHT: (70, 75),
}

_logger = logging.getLogger(__name__)


class MetricSource(Protocol):
    """Interface for anything that supplies metric series."""

    async def fetch(
        self, kind: MetricKind, days: int, offset_days: int = 0
    ) -> MetricSeries:
        """Return samples for ``days`` days ending ``offset_days`` before today.

        Samples are ordered oldest first.
        """


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MockMetricSource(MetricSource):
    """Metric source that generates plausible random values."""

    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], datetime] = _utc_now

    async def fetch(
        self, kind: MetricKind, days: int, offset_days: int = 0
    ) -> MetricSeries:
        """Generate exactly one sample per day of the window."""
        _logger.info("Generating mock %s data for %s days", kind.value, days)
        low, high = _MOCK_RANGES[kind]
        end = self.clock() - timedelta(days=offset_days)
        series: MetricSeries = []
        for offset in range(days - 1, -1, -1):
            timestamp = end - timedelta(days=offset)
            series.append(
                HealthMetric(
                    kind=kind,
                    value=self._sample(kind, low, high),
                    unit=METRIC_UNITS[kind],
                    observed_at=timestamp.date(),
                    timestamp=timestamp,
                )
            )
        return series

    def _sample(self, kind: MetricKind, low: float, high: float) -> float:
        if kind == MetricKind.SLEEP:
            return round(self.rng.uniform(low, high), 1)
        if kind == MetricKind.WEIGHT:
            base = (low + high) / 2
            return round(base + (self.rng.random() - 0.5) * 2, 1)
        return float(int(self.rng.uniform(low, high)))


def validate_days(days: int, minimum: int = MIN_DAYS, maximum: int = MAX_DAYS) -> int:
    """Ensure a day count is an integer within bounds."""
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidArgumentError(f"days must be an integer, got {days!r}")
    if not minimum <= days <= maximum:
        raise InvalidArgumentError(
            f"days must be between {minimum} and {maximum}, got {days}"
        )
    return days


@dataclass
class MetricsService:
    """Fetches metric series and snapshots from a metric source.

    When the primary source fails, the fallback source (mock data by default)
    answers instead. Only a service built with ``fallback_source=None`` raises
    UpstreamUnavailableError.
    """

    source: MetricSource
    fallback_source: MetricSource | None = field(default_factory=MockMetricSource)
    clock: Callable[[], datetime] = _utc_now

    async def fetch_series(
        self, kind: MetricKind, days: int, offset_days: int = 0
    ) -> MetricSeries:
        """Fetch a single metric series for the window."""
        validate_days(days)
        if offset_days < 0:
            raise InvalidArgumentError("offset_days must not be negative")
        try:
            return await self.source.fetch(kind, days, offset_days)
        except Exception as exc:
            if self.fallback_source is None:
                raise UpstreamUnavailableError(
                    f"Failed to fetch {kind.value} data"
                ) from exc
            _logger.warning(
                "Metric source failed for %s, using fallback: %s", kind.value, exc
            )
            return await self.fallback_source.fetch(kind, days, offset_days)

    async def fetch_snapshot(self, days: int, offset_days: int = 0) -> HealthSnapshot:
        """Fetch every metric kind concurrently and bundle them."""
        validate_days(days)
        steps, calories, heart_rate, sleep, weight = await asyncio.gather(
            *(
                self.fetch_series(kind, days, offset_days)
                for kind in (
                    MetricKind.STEPS,
                    MetricKind.CALORIES,
                    MetricKind.HEART_RATE,
                    MetricKind.SLEEP,
                    MetricKind.WEIGHT,
                )
            )
        )
        return HealthSnapshot(
            steps=steps,
            calories=calories,
            heart_rate=heart_rate,
            sleep=sleep,
            weight=weight,
            last_sync=self.clock(),
        )

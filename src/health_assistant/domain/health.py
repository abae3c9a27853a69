"""Domain models for health metrics."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class MetricKind(StrEnum):
    """Supported health metric kinds."""

    STEPS = "steps"
    CALORIES = "calories"
    HEART_RATE = "heart_rate"
    SLEEP = "sleep"
    WEIGHT = "weight"


METRIC_UNITS: dict[MetricKind, str] = {
    MetricKind.STEPS: "steps",
    MetricKind.CALORIES: "kcal",
    MetricKind.HEART_RATE: "bpm",
    MetricKind.SLEEP: "hours",
    MetricKind.WEIGHT: "kg",
}


@dataclass(frozen=True)
class HealthMetric:
    """Single dated observation of a health metric."""

    kind: MetricKind
    value: float
    unit: str
    observed_at: date
    timestamp: datetime

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the metric."""
        return {
            "type": self.kind.value,
            "value": self.value,
            "unit": self.unit,
            "date": self.observed_at.isoformat(),
            "timestamp": self.timestamp.isoformat(),
        }


MetricSeries = list[HealthMetric]


@dataclass(frozen=True)
class HealthSnapshot:
    """All metric series for a window plus the sync time."""

    steps: MetricSeries
    calories: MetricSeries
    heart_rate: MetricSeries
    sleep: MetricSeries
    weight: MetricSeries
    last_sync: datetime

    def series(self, kind: MetricKind) -> MetricSeries:
        """Return the series for a metric kind."""
        return getattr(self, kind.value)

    def metrics_count(self) -> dict[str, int]:
        """Return the number of samples per metric kind."""
        return {kind.value: len(self.series(kind)) for kind in MetricKind}

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the snapshot."""
        payload: dict[str, object] = {
            kind.value: [metric.to_payload() for metric in self.series(kind)]
            for kind in MetricKind
        }
        payload["lastSync"] = self.last_sync.isoformat()
        return payload

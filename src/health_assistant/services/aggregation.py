"""Aggregation helpers over metric series and snapshots."""

import math
from collections.abc import Sequence
from datetime import date

from health_assistant.domain.health import HealthMetric, HealthSnapshot, MetricKind

_ONE_DECIMAL_KINDS = {MetricKind.SLEEP, MetricKind.WEIGHT}


def average(series: Sequence[HealthMetric]) -> float:
    """Return the mean value of a series, or 0 when it is empty."""
    if not series:
        return 0.0
    return total(series) / len(series)


def total(series: Sequence[HealthMetric]) -> float:
    """Return the sum of a series, or 0 when it is empty."""
    return float(sum(metric.value for metric in series))


def latest(series: Sequence[HealthMetric], on_date: date | None = None) -> float:
    """Return the value observed on a date, falling back to the newest sample."""
    if not series:
        return 0.0
    if on_date is not None:
        for metric in series:
            if metric.observed_at == on_date:
                return metric.value
    return max(series, key=lambda metric: metric.timestamp).value


def round_for_kind(kind: MetricKind, value: float) -> float:
    """Round a value the way it is displayed for its metric kind.

    Sleep and weight keep one decimal; counts are whole numbers. Halves round
    up, so -0.5 becomes 0 and 2.5 becomes 3.
    """
    if kind in _ONE_DECIMAL_KINDS:
        return math.floor(value * 10 + 0.5) / 10
    return float(math.floor(value + 0.5))


def trend_delta(
    current: Sequence[HealthMetric],
    previous: Sequence[HealthMetric],
    kind: MetricKind,
) -> float:
    """Return the rounded difference of means between two windows."""
    return round_for_kind(kind, average(current) - average(previous))


def snapshot_averages(snapshot: HealthSnapshot) -> dict[str, float]:
    """Return display averages for the activity metrics."""
    return {
        "steps": round_for_kind(MetricKind.STEPS, average(snapshot.steps)),
        "calories": round_for_kind(MetricKind.CALORIES, average(snapshot.calories)),
        "heartRate": round_for_kind(
            MetricKind.HEART_RATE, average(snapshot.heart_rate)
        ),
        "sleep": round_for_kind(MetricKind.SLEEP, average(snapshot.sleep)),
    }


def snapshot_totals(snapshot: HealthSnapshot) -> dict[str, float]:
    """Return period totals for the additive metrics."""
    return {
        "steps": total(snapshot.steps),
        "calories": total(snapshot.calories),
        "sleepHours": total(snapshot.sleep),
    }


def latest_metrics(snapshot: HealthSnapshot) -> dict[MetricKind, float]:
    """Return the newest value of every metric kind."""
    return {kind: latest(snapshot.series(kind)) for kind in MetricKind}


def snapshot_trend_deltas(
    current: HealthSnapshot, previous: HealthSnapshot
) -> dict[MetricKind, float]:
    """Return per-kind rounded deltas between two snapshots."""
    return {
        kind: trend_delta(current.series(kind), previous.series(kind), kind)
        for kind in MetricKind
    }

"""Health data tools: raw data, questions, summaries and trends."""

import logging
from dataclasses import dataclass

from health_assistant.domain.errors import (
    InvalidArgumentError,
    UpstreamUnavailableError,
)
from health_assistant.domain.health import HealthSnapshot, MetricKind
from health_assistant.services.aggregation import (
    snapshot_averages,
    snapshot_totals,
    snapshot_trend_deltas,
)
from health_assistant.services.metrics import MetricsService, validate_days
from health_assistant.services.narrator import InsightNarrator
from health_assistant.services.prompts import (
    CANNED_SUMMARIES,
    HEALTH_ASSISTANT_SYSTEM_PROMPT,
    NO_HISTORY_ANALYSIS,
    QUESTION_FALLBACK,
    TRENDS_FALLBACK,
    canned_answer,
    question_prompt,
    summary_prompt,
    trends_prompt,
)

PERIOD_DAYS: dict[str, int] = {"today": 1, "week": 7, "month": 30}
QUESTION_CONTEXT_DAYS = 7
MIN_TREND_DAYS = 7
MAX_TREND_DAYS = 365
ALL_METRICS = "all"

_logger = logging.getLogger(__name__)


@dataclass
class HealthToolsService:
    """Implements the health data tools on top of metrics and the narrator."""

    metrics: MetricsService
    narrator: InsightNarrator

    async def get_health_data(
        self, metric_type: str = ALL_METRICS, days: int = 7
    ) -> dict[str, object] | list[dict[str, object]]:
        """Return one metric series, or a snapshot when ``metric_type`` is all."""
        validate_days(days)
        if metric_type == ALL_METRICS:
            snapshot = await self.metrics.fetch_snapshot(days)
            return snapshot.to_payload()
        try:
            kind = MetricKind(metric_type)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Unknown metric type {metric_type!r}"
            ) from exc
        series = await self.metrics.fetch_series(kind, days)
        return [metric.to_payload() for metric in series]

    async def ask_health_question(
        self, question: str, include_data: bool = True
    ) -> dict[str, object]:
        """Answer a free-form question, optionally grounded in recent data."""
        if not question or not question.strip():
            raise InvalidArgumentError("Question is required")

        snapshot: HealthSnapshot | None = None
        if include_data:
            try:
                snapshot = await self.metrics.fetch_snapshot(QUESTION_CONTEXT_DAYS)
            except UpstreamUnavailableError:
                _logger.warning(
                    "Could not fetch health data for question context", exc_info=True
                )

        fallback = (
            QUESTION_FALLBACK if self.narrator.configured else canned_answer(question)
        )
        answer = await self.narrator.narrate(
            question_prompt(question, snapshot),
            fallback,
            system_prompt=HEALTH_ASSISTANT_SYSTEM_PROMPT,
            max_tokens=300,
            temperature=0.7,
        )
        return {
            "answer": answer,
            "question": question,
            "healthDataIncluded": snapshot is not None,
        }

    async def get_health_summary(self, period: str = "week") -> dict[str, object]:
        """Summarize the user's health for today, this week or this month."""
        days = PERIOD_DAYS.get(period)
        if days is None:
            raise InvalidArgumentError(
                f"period must be one of {', '.join(PERIOD_DAYS)}, got {period!r}"
            )
        snapshot = await self.metrics.fetch_snapshot(days)
        fallback = (
            "Unable to generate health summary at this time."
            if self.narrator.configured
            else CANNED_SUMMARIES[period]
        )
        summary = await self.narrator.narrate(
            summary_prompt(snapshot, period),
            fallback,
            max_tokens=200,
            temperature=0.6,
        )
        return {
            "summary": summary,
            "period": period,
            "healthData": {
                "totalDays": days,
                "metricsCount": snapshot.metrics_count(),
            },
        }

    async def get_health_trends(self, days: int = 30) -> dict[str, object]:
        """Compare the trailing window with the window before it."""
        validate_days(days, MIN_TREND_DAYS, MAX_TREND_DAYS)
        current = await self.metrics.fetch_snapshot(days)
        previous = await self._previous_snapshot(days)

        changes: dict[str, float] = {}
        if previous is None or not previous.steps:
            analysis = NO_HISTORY_ANALYSIS
        else:
            deltas = snapshot_trend_deltas(current, previous)
            changes = {kind.value: delta for kind, delta in deltas.items()}
            analysis = await self.narrator.narrate(
                trends_prompt(deltas),
                TRENDS_FALLBACK,
                max_tokens=150,
                temperature=0.7,
            )

        return {
            "trends": {
                "averages": snapshot_averages(current),
                "totals": snapshot_totals(current),
                "changes": changes,
                "trends": {
                    "analysis": analysis,
                    "period": f"{days} days",
                    "dataPoints": len(current.steps),
                },
            },
            "period": days,
            "healthData": current.to_payload(),
        }

    async def _previous_snapshot(self, days: int) -> HealthSnapshot | None:
        try:
            return await self.metrics.fetch_snapshot(days, offset_days=days)
        except UpstreamUnavailableError:
            _logger.warning("Previous period data unavailable", exc_info=True)
            return None

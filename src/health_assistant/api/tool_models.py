"""Pydantic models for tool request and response payloads."""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from health_assistant.domain.meals import (
    CalorieRange,
    MealCategory,
    RecommendationRequest,
)


class HealthDataRequest(BaseModel):
    """Body for the health data tool."""

    metric_type: Literal[
        "steps", "calories", "heart_rate", "sleep", "weight", "all"
    ] = "all"
    days: int = Field(default=7, ge=1, le=365)


class HealthQuestionRequest(BaseModel):
    """Body for the health question tool."""

    question: str | None = None
    include_data: bool = True


class HealthSummaryRequest(BaseModel):
    """Body for the health summary tool."""

    period: Literal["today", "week", "month"] = "week"


class HealthTrendsRequest(BaseModel):
    """Body for the health trends tool."""

    days: int = Field(default=30, ge=7, le=365)


class MealRecommendationRequest(BaseModel):
    """Body for the meal recommendation tool."""

    meal_type: MealCategory | None = None
    max_prep_time: float | None = Field(default=None, ge=0)
    dietary_restrictions: list[str] = Field(default_factory=list)
    calorie_range: CalorieRange | None = None
    activity_level: str | None = None

    def to_domain(self) -> RecommendationRequest:
        """Convert the payload into a domain request."""
        return RecommendationRequest(
            meal_type=self.meal_type.value if self.meal_type else None,
            max_prep_time=self.max_prep_time,
            dietary_restrictions=[
                item.strip() for item in self.dietary_restrictions if item.strip()
            ],
            calorie_range=self.calorie_range.value if self.calorie_range else None,
            activity_level=self.activity_level,
        )


class ToolResult(BaseModel):
    """Uniform envelope for every tool response."""

    success: bool
    data: Any = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

"""Meal recommendation pipeline."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from health_assistant.domain.errors import InvalidArgumentError
from health_assistant.domain.meals import (
    CalorieRange,
    Meal,
    MealCategory,
    RecommendationRequest,
    RecommendationResult,
)
from health_assistant.services.catalog import MealCatalog
from health_assistant.services.narrator import InsightNarrator
from health_assistant.services.prompts import (
    MEAL_FALLBACK,
    format_number,
    meal_prompt,
)

MAX_MATCHES = 5
NARRATED_MEALS = 3
LOW_CARB_GRAMS = 30
HIGH_PROTEIN_GRAMS = 20

# Bands are inclusive at both ends; only one band is selected per request.
CALORIE_BANDS: dict[CalorieRange, tuple[float, float]] = {
    CalorieRange.LOW: (0, 300),
    CalorieRange.MEDIUM: (300, 500),
    CalorieRange.HIGH: (500, 1000),
}

_logger = logging.getLogger(__name__)


def _has_any_tag(meal: Meal, *tags: str) -> bool:
    return any(tag in meal.tags for tag in tags)


_RESTRICTION_RULES: dict[str, Callable[[Meal], bool]] = {
    "vegetarian": lambda meal: _has_any_tag(meal, "vegetarian", "vegan"),
    "vegan": lambda meal: _has_any_tag(meal, "vegan"),
    "low-carb": lambda meal: (
        meal.nutrition.carbs < LOW_CARB_GRAMS
        or _has_any_tag(meal, "low-carb", "keto-friendly")
    ),
    "keto": lambda meal: (
        meal.nutrition.carbs < LOW_CARB_GRAMS
        or _has_any_tag(meal, "low-carb", "keto-friendly")
    ),
    "high-protein": lambda meal: (
        meal.nutrition.protein >= HIGH_PROTEIN_GRAMS
        or _has_any_tag(meal, "high-protein")
    ),
    "gluten-free": lambda meal: _has_any_tag(meal, "gluten-free"),
}


def matches_restriction(meal: Meal, restriction: str) -> bool:
    """Return whether a meal satisfies one dietary restriction."""
    needle = restriction.lower()
    if any(needle in tag.lower() for tag in meal.tags):
        return True
    rule = _RESTRICTION_RULES.get(needle)
    return rule(meal) if rule else False


def describe_filters(request: RecommendationRequest) -> str:
    """Return a human-readable description of the applied filters."""
    parts: list[str] = []
    if request.meal_type:
        parts.append(f"Showing {request.meal_type} options")
    if request.max_prep_time is not None:
        prep_time = format_number(request.max_prep_time)
        parts.append(f"under {prep_time} minutes prep time")
    if request.calorie_range:
        parts.append(f"{request.calorie_range} calorie range")
    if request.restrictions:
        parts.append(f"following {', '.join(request.restrictions)} diet")
    if not parts:
        return "Showing all available meal options"
    return f"Filtered for: {', '.join(parts)}"


def _parse_category(value: str) -> MealCategory:
    try:
        return MealCategory(value)
    except ValueError as exc:
        allowed = ", ".join(category.value for category in MealCategory)
        raise InvalidArgumentError(
            f"meal_type must be one of {allowed}, got {value!r}"
        ) from exc


def _parse_calorie_range(value: str) -> CalorieRange:
    try:
        return CalorieRange(value)
    except ValueError as exc:
        allowed = ", ".join(band.value for band in CalorieRange)
        raise InvalidArgumentError(
            f"calorie_range must be one of {allowed}, got {value!r}"
        ) from exc


def filter_meals(catalog: MealCatalog, request: RecommendationRequest) -> list[Meal]:
    """Apply the category, prep time, calorie and diet filters in order."""
    if request.meal_type:
        candidates = catalog.for_category(_parse_category(request.meal_type))
    else:
        candidates = catalog.all_meals()

    if request.max_prep_time is not None:
        if request.max_prep_time < 0:
            raise InvalidArgumentError("max_prep_time must not be negative")
        candidates = [
            meal
            for meal in candidates
            if meal.prep_time_minutes <= request.max_prep_time
        ]

    if request.calorie_range:
        low, high = CALORIE_BANDS[_parse_calorie_range(request.calorie_range)]
        candidates = [meal for meal in candidates if low <= meal.calories <= high]

    if request.restrictions:
        candidates = [
            meal
            for meal in candidates
            if all(
                matches_restriction(meal, restriction)
                for restriction in request.restrictions
            )
        ]
    return candidates


@dataclass
class MealRecommendationService:
    """Filters the meal catalog and narrates the best matches."""

    catalog: MealCatalog
    narrator: InsightNarrator

    async def recommend(self, request: RecommendationRequest) -> RecommendationResult:
        """Return filtered meals with a narrative and filter description."""
        candidates = filter_meals(self.catalog, request)
        _logger.info(
            "Meal recommendations: %s of %s meals matched",
            len(candidates),
            len(self.catalog),
        )
        narrative = await self.narrator.narrate(
            meal_prompt(candidates[:NARRATED_MEALS], request),
            MEAL_FALLBACK,
            max_tokens=150,
        )
        return RecommendationResult(
            matches=candidates[:MAX_MATCHES],
            total_match_count=len(candidates),
            narrative=narrative,
            applied_filter_description=describe_filters(request),
            filters=request,
        )

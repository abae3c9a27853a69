"""Domain models for the meal catalog and recommendations."""

from dataclasses import dataclass, field
from enum import StrEnum


class MealCategory(StrEnum):
    """Meal categories in catalog order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class CalorieRange(StrEnum):
    """Calorie bands a request can select."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Difficulty(StrEnum):
    """Recipe difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Nutrition:
    """Macronutrients for a meal in grams."""

    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class Ingredient:
    """Recipe ingredient with a free-form amount."""

    name: str
    amount: str


@dataclass(frozen=True)
class Meal:
    """Recipe record from the meal catalog."""

    id: str
    name: str
    category: MealCategory
    calories: float
    prep_time_minutes: float
    difficulty: Difficulty
    nutrition: Nutrition
    tags: tuple[str, ...] = ()
    ingredients: tuple[Ingredient, ...] = ()
    instructions: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the meal."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "calories": self.calories,
            "prep_time": self.prep_time_minutes,
            "difficulty": self.difficulty,
            "nutrition": {
                "protein": self.nutrition.protein,
                "carbs": self.nutrition.carbs,
                "fat": self.nutrition.fat,
                "fiber": self.nutrition.fiber,
            },
            "tags": list(self.tags),
            "ingredients": [
                {"name": item.name, "amount": item.amount} for item in self.ingredients
            ],
            "instructions": list(self.instructions),
        }


@dataclass(frozen=True)
class RecommendationRequest:
    """Optional constraints for meal recommendations."""

    meal_type: str | None = None
    max_prep_time: float | None = None
    dietary_restrictions: list[str] = field(default_factory=list)
    calorie_range: str | None = None
    activity_level: str | None = None

    @property
    def restrictions(self) -> list[str]:
        """Dietary restrictions with blank entries dropped."""
        return [item.strip() for item in self.dietary_restrictions if item.strip()]

    def to_payload(self) -> dict[str, object]:
        """Return the request fields that were set."""
        payload: dict[str, object] = {}
        if self.meal_type:
            payload["meal_type"] = self.meal_type
        if self.max_prep_time is not None:
            payload["max_prep_time"] = self.max_prep_time
        if self.restrictions:
            payload["dietary_restrictions"] = self.restrictions
        if self.calorie_range:
            payload["calorie_range"] = self.calorie_range
        if self.activity_level:
            payload["activity_level"] = self.activity_level
        return payload


@dataclass(frozen=True)
class RecommendationResult:
    """Filtered meals with a narrative and a description of the filters."""

    matches: list[Meal]
    total_match_count: int
    narrative: str
    applied_filter_description: str
    filters: RecommendationRequest

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of the result."""
        return {
            "recommendations": [meal.to_payload() for meal in self.matches],
            "totalAvailable": self.total_match_count,
            "filters": self.filters.to_payload(),
            "aiInsight": self.narrative,
            "recommendationContext": self.applied_filter_description,
        }

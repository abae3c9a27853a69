"""Meal catalog loading."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from health_assistant.domain.meals import (
    Difficulty,
    Ingredient,
    Meal,
    MealCategory,
    Nutrition,
)

_logger = logging.getLogger(__name__)

# Catalog files group snacks under a plural key.
_CATEGORY_KEYS: dict[MealCategory, tuple[str, ...]] = {
    MealCategory.BREAKFAST: ("breakfast",),
    MealCategory.LUNCH: ("lunch",),
    MealCategory.DINNER: ("dinner",),
    MealCategory.SNACK: ("snacks", "snack"),
}


class NutritionRecord(BaseModel):
    """Macronutrient payload from the catalog file."""

    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0


class IngredientRecord(BaseModel):
    """Ingredient payload from the catalog file."""

    name: str
    amount: str = ""


class MealRecord(BaseModel):
    """Meal payload from the catalog file."""

    id: str
    name: str
    category: MealCategory | None = None
    calories: float = Field(ge=0)
    prep_time: float = Field(ge=0)
    difficulty: Difficulty = Difficulty.EASY
    nutrition: NutritionRecord = Field(default_factory=NutritionRecord)
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientRecord] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    def to_meal(self, category: MealCategory) -> Meal:
        """Convert the record into a domain meal."""
        return Meal(
            id=self.id,
            name=self.name,
            category=self.category or category,
            calories=self.calories,
            prep_time_minutes=self.prep_time,
            difficulty=self.difficulty,
            nutrition=Nutrition(
                protein=self.nutrition.protein,
                carbs=self.nutrition.carbs,
                fat=self.nutrition.fat,
                fiber=self.nutrition.fiber,
            ),
            tags=tuple(self.tags),
            ingredients=tuple(
                Ingredient(name=item.name, amount=item.amount)
                for item in self.ingredients
            ),
            instructions=tuple(self.instructions),
        )


@dataclass(frozen=True)
class MealCatalog:
    """Read-only meals grouped by category."""

    meals_by_category: dict[MealCategory, tuple[Meal, ...]]

    def for_category(self, category: MealCategory) -> list[Meal]:
        """Return meals in a single category."""
        return list(self.meals_by_category.get(category, ()))

    def all_meals(self) -> list[Meal]:
        """Return every meal in breakfast, lunch, dinner, snack order."""
        meals: list[Meal] = []
        for category in MealCategory:
            meals.extend(self.for_category(category))
        return meals

    def __len__(self) -> int:
        return sum(len(meals) for meals in self.meals_by_category.values())


def parse_meal_catalog(payload: dict[str, object]) -> MealCatalog:
    """Build a catalog from the grouped JSON layout."""
    grouped: dict[MealCategory, tuple[Meal, ...]] = {}
    for category, keys in _CATEGORY_KEYS.items():
        raw_meals: list[object] = []
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                raw_meals.extend(value)
        grouped[category] = tuple(
            MealRecord.model_validate(raw).to_meal(category) for raw in raw_meals
        )
    return MealCatalog(meals_by_category=grouped)


def load_meal_catalog(path: str | Path | None) -> MealCatalog:
    """Load the catalog from a JSON file, or the fallback set if unavailable."""
    if path is None:
        return fallback_meal_catalog()
    catalog_path = Path(path)
    if not catalog_path.exists():
        _logger.warning("Meal catalog %s not found, using fallback", catalog_path)
        return fallback_meal_catalog()
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise TypeError("meal catalog must be a JSON object")
        catalog = parse_meal_catalog(payload)
    except (OSError, TypeError, ValueError, ValidationError):
        _logger.warning(
            "Failed to load meal catalog %s, using fallback",
            catalog_path,
            exc_info=True,
        )
        return fallback_meal_catalog()
    _logger.info("Loaded %s meals from %s", len(catalog), catalog_path)
    return catalog


def fallback_meal_catalog() -> MealCatalog:
    """Return the built-in four meal catalog."""
    return parse_meal_catalog(FALLBACK_MEALS)


FALLBACK_MEALS: dict[str, object] = {
    "breakfast": [
        {
            "id": "breakfast_001",
            "name": "Avocado Toast with Eggs",
            "category": "breakfast",
            "calories": 420,
            "prep_time": 10,
            "difficulty": "easy",
            "nutrition": {"protein": 18, "carbs": 35, "fat": 24, "fiber": 12},
            "tags": ["vegetarian", "high-protein", "quick"],
            "ingredients": [
                {"name": "Whole grain bread", "amount": "2 slices"},
                {"name": "Avocado", "amount": "1 medium"},
                {"name": "Eggs", "amount": "2 large"},
            ],
            "instructions": [
                "Toast bread until golden brown",
                "Mash avocado with lime juice, salt, and pepper",
                "Cook eggs to your preference",
                "Spread avocado on toast, top with eggs",
            ],
        }
    ],
    "lunch": [
        {
            "id": "lunch_001",
            "name": "Mediterranean Quinoa Salad",
            "category": "lunch",
            "calories": 450,
            "prep_time": 15,
            "difficulty": "easy",
            "nutrition": {"protein": 16, "carbs": 55, "fat": 18, "fiber": 8},
            "tags": ["vegetarian", "mediterranean", "meal-prep"],
            "ingredients": [
                {"name": "Cooked quinoa", "amount": "1 cup"},
                {"name": "Cucumber", "amount": "1 medium diced"},
                {"name": "Cherry tomatoes", "amount": "1 cup halved"},
            ],
            "instructions": [
                "Mix quinoa, cucumber, tomatoes, and onion",
                "Add feta cheese",
                "Whisk olive oil and lemon juice",
                "Toss with dressing and serve",
            ],
        }
    ],
    "dinner": [
        {
            "id": "dinner_001",
            "name": "Herb-Crusted Chicken with Roasted Vegetables",
            "category": "dinner",
            "calories": 520,
            "prep_time": 35,
            "difficulty": "medium",
            "nutrition": {"protein": 42, "carbs": 25, "fat": 28, "fiber": 8},
            "tags": ["high-protein", "one-pan", "lean"],
            "ingredients": [
                {"name": "Chicken breast", "amount": "6 oz"},
                {"name": "Mixed herbs", "amount": "2 tbsp"},
                {"name": "Brussels sprouts", "amount": "1 cup halved"},
            ],
            "instructions": [
                "Coat chicken with herbs and oil",
                "Toss vegetables with oil and garlic",
                "Roast vegetables at 425°F for 20 minutes",
                "Add chicken, cook 15 minutes more",
            ],
        }
    ],
    "snacks": [
        {
            "id": "snack_001",
            "name": "Apple with Almond Butter",
            "category": "snack",
            "calories": 190,
            "prep_time": 2,
            "difficulty": "easy",
            "nutrition": {"protein": 6, "carbs": 25, "fat": 8, "fiber": 6},
            "tags": ["quick", "portable", "natural-sugars"],
            "ingredients": [
                {"name": "Apple", "amount": "1 medium"},
                {"name": "Almond butter", "amount": "1 tbsp"},
            ],
            "instructions": [
                "Wash and slice apple",
                "Serve with almond butter for dipping",
            ],
        }
    ],
}

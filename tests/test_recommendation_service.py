"""Tests for the meal recommendation pipeline."""

import asyncio

import pytest

from health_assistant.domain.errors import InvalidArgumentError
from health_assistant.domain.meals import (
    Difficulty,
    Meal,
    MealCategory,
    Nutrition,
    RecommendationRequest,
)
from health_assistant.services.catalog import MealCatalog, fallback_meal_catalog
from health_assistant.services.narrator import InsightNarrator
from health_assistant.services.prompts import MEAL_FALLBACK
from health_assistant.services.recommendations import (
    MealRecommendationService,
    describe_filters,
    matches_restriction,
)
from tests.conftest import FailingNarrator, FakeNarrator, SlowNarrator


def _meal(
    meal_id: str,
    category: MealCategory,
    calories: float = 400,
    prep: float = 10,
    tags: tuple[str, ...] = (),
    protein: float = 10,
    carbs: float = 40,
) -> Meal:
    return Meal(
        id=meal_id,
        name=f"Meal {meal_id}",
        category=category,
        calories=calories,
        prep_time_minutes=prep,
        difficulty=Difficulty.EASY,
        nutrition=Nutrition(protein=protein, carbs=carbs, fat=10, fiber=3),
        tags=tags,
    )


def _large_catalog() -> MealCatalog:
    return MealCatalog(
        meals_by_category={
            MealCategory.BREAKFAST: tuple(
                _meal(f"b{i}", MealCategory.BREAKFAST) for i in range(3)
            ),
            MealCategory.LUNCH: tuple(
                _meal(f"l{i}", MealCategory.LUNCH) for i in range(3)
            ),
            MealCategory.DINNER: (_meal("d0", MealCategory.DINNER),),
            MealCategory.SNACK: (_meal("s0", MealCategory.SNACK),),
        }
    )


def _service(
    catalog: MealCatalog | None = None, narrator: object | None = None
) -> MealRecommendationService:
    return MealRecommendationService(
        catalog=catalog or fallback_meal_catalog(),
        narrator=InsightNarrator(narrator=narrator or FakeNarrator()),
    )


def _names(result) -> list[str]:  # type: ignore[no-untyped-def]
    return [meal.name for meal in result.matches]


def test_no_filters_returns_first_five_in_category_order() -> None:
    result = asyncio.run(_service(_large_catalog()).recommend(RecommendationRequest()))

    assert [meal.id for meal in result.matches] == ["b0", "b1", "b2", "l0", "l1"]
    assert result.total_match_count == 8
    assert result.applied_filter_description == "Showing all available meal options"


def test_meal_type_selects_single_category() -> None:
    result = asyncio.run(
        _service().recommend(RecommendationRequest(meal_type="breakfast"))
    )

    assert _names(result) == ["Avocado Toast with Eggs"]
    assert result.total_match_count == 1
    assert result.applied_filter_description == "Filtered for: Showing breakfast options"


def test_high_calorie_range_keeps_only_band() -> None:
    result = asyncio.run(_service().recommend(RecommendationRequest(calorie_range="high")))

    assert "Herb-Crusted Chicken with Roasted Vegetables" in _names(result)
    assert "Apple with Almond Butter" not in _names(result)
    assert all(500 <= meal.calories <= 1000 for meal in result.matches)


def test_low_calorie_range_bounds() -> None:
    result = asyncio.run(_service().recommend(RecommendationRequest(calorie_range="low")))

    assert _names(result) == ["Apple with Almond Butter"]
    assert all(0 <= meal.calories <= 300 for meal in result.matches)


def test_calorie_band_is_inclusive_at_both_ends() -> None:
    catalog = MealCatalog(
        meals_by_category={
            MealCategory.LUNCH: (
                _meal("edge300", MealCategory.LUNCH, calories=300),
                _meal("edge500", MealCategory.LUNCH, calories=500),
            )
        }
    )
    service = _service(catalog)

    low = asyncio.run(service.recommend(RecommendationRequest(calorie_range="low")))
    medium = asyncio.run(
        service.recommend(RecommendationRequest(calorie_range="medium"))
    )
    high = asyncio.run(service.recommend(RecommendationRequest(calorie_range="high")))

    assert [m.id for m in low.matches] == ["edge300"]
    assert [m.id for m in medium.matches] == ["edge300", "edge500"]
    assert [m.id for m in high.matches] == ["edge500"]


def test_vegetarian_restriction() -> None:
    result = asyncio.run(
        _service().recommend(
            RecommendationRequest(dietary_restrictions=["vegetarian"])
        )
    )

    assert "Avocado Toast with Eggs" in _names(result)
    assert "Mediterranean Quinoa Salad" in _names(result)
    assert "Herb-Crusted Chicken with Roasted Vegetables" not in _names(result)


def test_vegan_restriction_requires_vegan_tag() -> None:
    catalog = MealCatalog(
        meals_by_category={
            MealCategory.LUNCH: (
                _meal("veg", MealCategory.LUNCH, tags=("vegetarian",)),
                _meal("vgn", MealCategory.LUNCH, tags=("vegan", "quick")),
            )
        }
    )

    result = asyncio.run(
        _service(catalog).recommend(
            RecommendationRequest(dietary_restrictions=["vegan"])
        )
    )

    assert [meal.id for meal in result.matches] == ["vgn"]
    assert all("vegan" in meal.tags for meal in result.matches)


def test_restrictions_combine_with_and() -> None:
    result = asyncio.run(
        _service().recommend(
            RecommendationRequest(dietary_restrictions=["vegetarian", "high-protein"])
        )
    )

    assert _names(result) == ["Avocado Toast with Eggs"]


def test_restriction_rules_use_nutrition() -> None:
    lean = _meal("lean", MealCategory.DINNER, protein=25, carbs=12)
    heavy = _meal("heavy", MealCategory.DINNER, protein=5, carbs=80)
    tagged = _meal("tagged", MealCategory.DINNER, carbs=80, tags=("keto-friendly",))

    assert matches_restriction(lean, "keto")
    assert matches_restriction(lean, "low-carb")
    assert matches_restriction(lean, "high-protein")
    assert not matches_restriction(heavy, "low-carb")
    assert not matches_restriction(heavy, "high-protein")
    assert matches_restriction(tagged, "keto")


def test_restriction_substring_match_is_case_insensitive() -> None:
    meal = _meal("m", MealCategory.LUNCH, tags=("Mediterranean",))

    assert matches_restriction(meal, "mediterranean")
    assert matches_restriction(meal, "MEDITER")
    assert not matches_restriction(meal, "paleo")


def test_prep_time_ceiling() -> None:
    result = asyncio.run(_service().recommend(RecommendationRequest(max_prep_time=10)))

    assert _names(result) == ["Avocado Toast with Eggs", "Apple with Almond Butter"]
    assert all(meal.prep_time_minutes <= 10 for meal in result.matches)


def test_describe_filters_lists_clauses_in_order() -> None:
    request = RecommendationRequest(
        meal_type="dinner",
        max_prep_time=30,
        dietary_restrictions=["vegetarian", "gluten-free"],
        calorie_range="medium",
    )

    assert describe_filters(request) == (
        "Filtered for: Showing dinner options, under 30 minutes prep time, "
        "medium calorie range, following vegetarian, gluten-free diet"
    )


def test_narrator_receives_top_three_meals() -> None:
    narrator = FakeNarrator()
    result = asyncio.run(
        _service(_large_catalog(), narrator).recommend(RecommendationRequest())
    )

    prompt = narrator.prompts[0]
    assert "Meal b0 (400 cal, 10min, easy)" in prompt
    assert "Meal l0" not in prompt
    assert result.narrative == "Great choices for your goals."


@pytest.mark.parametrize("narrator", [FailingNarrator(), FailingNarrator(RuntimeError("x"))])
def test_narrator_failure_falls_back(narrator: FailingNarrator) -> None:
    result = asyncio.run(
        _service(narrator=narrator).recommend(RecommendationRequest())
    )

    assert result.narrative == MEAL_FALLBACK
    assert result.total_match_count == 4


def test_narrator_timeout_falls_back() -> None:
    service = MealRecommendationService(
        catalog=fallback_meal_catalog(),
        narrator=InsightNarrator(narrator=SlowNarrator(), timeout_seconds=0.01),
    )

    result = asyncio.run(service.recommend(RecommendationRequest(meal_type="lunch")))

    assert result.narrative == MEAL_FALLBACK
    assert _names(result) == ["Mediterranean Quinoa Salad"]


@pytest.mark.parametrize(
    "request_",
    [
        RecommendationRequest(meal_type="brunch"),
        RecommendationRequest(calorie_range="extreme"),
        RecommendationRequest(max_prep_time=-5),
    ],
)
def test_invalid_arguments_are_rejected(request_: RecommendationRequest) -> None:
    with pytest.raises(InvalidArgumentError):
        asyncio.run(_service().recommend(request_))


def test_result_payload_shape() -> None:
    result = asyncio.run(
        _service().recommend(
            RecommendationRequest(meal_type="snack", activity_level="high")
        )
    )

    payload = result.to_payload()

    assert payload["totalAvailable"] == 1
    assert payload["filters"] == {"meal_type": "snack", "activity_level": "high"}
    assert payload["recommendations"][0]["prep_time"] == 2
    assert payload["recommendationContext"] == "Filtered for: Showing snack options"


def test_describe_filters_prints_large_prep_time_in_full() -> None:
    request = RecommendationRequest(max_prep_time=1500000)

    assert describe_filters(request) == (
        "Filtered for: under 1500000 minutes prep time"
    )


def test_blank_restrictions_are_ignored() -> None:
    result = asyncio.run(
        _service().recommend(RecommendationRequest(dietary_restrictions=["", "  "]))
    )

    assert result.total_match_count == 4
    assert result.applied_filter_description == "Showing all available meal options"
    assert result.to_payload()["filters"] == {}

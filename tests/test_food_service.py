"""Tests for the food catalog service."""

import asyncio

import pytest

from nutrilog.domain.foods import (
    FoodCategory,
    MeasurementUnit,
    NewFoodItem,
    NewServingSize,
)
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.foods import FoodService
from tests.conftest import APPLE_ID, BANANA_ID


def _granola(**overrides: object) -> NewFoodItem:
    values: dict[str, object] = {
        "name": "Granola",
        "category": FoodCategory.GRAIN,
        "nutrition_per_100g": NutritionalInfo(
            calories=471, protein=10, carbs=64, fat=20, fiber=7, sugar=24
        ),
        "brand": "Oat Co",
    }
    values.update(overrides)
    return NewFoodItem(**values)


def test_seeded_food_has_servings(food_service: FoodService) -> None:
    apple = asyncio.run(food_service.get_food(APPLE_ID))

    assert apple is not None
    assert apple.name == "Apple"
    assert apple.nutrition_per_100g.calories == 52
    assert [serving.name for serving in apple.serving_sizes] == [
        "100g",
        "1 medium",
        "1 cup",
    ]


def test_create_food_defaults_servings_by_category(food_service: FoodService) -> None:
    created = asyncio.run(food_service.create_food(_granola()))

    assert created.is_custom
    assert [serving.name for serving in created.serving_sizes] == [
        "100g",
        "1 cup cooked",
        "1 slice",
    ]
    assert asyncio.run(food_service.get_food(created.id)) == created


def test_create_food_keeps_given_servings(food_service: FoodService) -> None:
    created = asyncio.run(
        food_service.create_food(
            _granola(
                serving_sizes=[NewServingSize("1 bowl", 45, MeasurementUnit.CUP)]
            )
        )
    )

    assert len(created.serving_sizes) == 1
    assert created.serving_sizes[0].weight == 45


@pytest.mark.parametrize(
    "food",
    [
        _granola(name="  "),
        _granola(serving_sizes=[NewServingSize("none", 0, MeasurementUnit.G)]),
    ],
)
def test_create_food_rejects_invalid_input(
    food_service: FoodService, food: NewFoodItem
) -> None:
    with pytest.raises(ValueError):
        asyncio.run(food_service.create_food(food))


def test_search_matches_names_case_insensitively(food_service: FoodService) -> None:
    results = asyncio.run(food_service.search("BAN"))

    assert [food.id for food in results] == [BANANA_ID]


def test_search_treats_wildcards_literally(food_service: FoodService) -> None:
    assert asyncio.run(food_service.search("%")) == []
    assert asyncio.run(food_service.search("_")) == []


def test_blank_search_returns_nothing(food_service: FoodService) -> None:
    assert asyncio.run(food_service.search("   ")) == []
    assert asyncio.run(food_service.search(None)) == []


def test_favorites_are_per_user_and_unique(
    profile, food_service: FoodService
) -> None:
    asyncio.run(food_service.add_favorite(profile.id, APPLE_ID))
    asyncio.run(food_service.add_favorite(profile.id, APPLE_ID))
    asyncio.run(food_service.add_favorite(profile.id, BANANA_ID))

    favorites = asyncio.run(food_service.list_favorites(profile.id))
    assert {food.id for food in favorites} == {APPLE_ID, BANANA_ID}
    assert len(favorites) == 2

    asyncio.run(food_service.remove_favorite(profile.id, APPLE_ID))

    remaining = asyncio.run(food_service.list_favorites(profile.id))
    assert [food.id for food in remaining] == [BANANA_ID]


def test_search_orders_by_name_and_honours_limit(food_service: FoodService) -> None:
    limited = asyncio.run(food_service.search("a", 2))
    ordered = asyncio.run(food_service.search("r", 10))

    assert [food.name for food in limited] == ["Apple", "Banana"]
    assert [food.name for food in ordered] == [
        "Broccoli",
        "Brown Rice",
        "Chicken Breast",
    ]

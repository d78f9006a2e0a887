"""Tests for text and photo food recognition."""

import asyncio

import pytest

from nutrilog.domain.foods import FoodCategory
from nutrilog.domain.recognition import PLACEHOLDER_FOOD, RecognizedFood
from nutrilog.services.food_input import (
    FoodInputService,
    FoodRecognitionError,
    map_category,
    parse_recognition,
    to_data_url,
    to_new_food,
)
from tests.conftest import FakeRecognitionClient


def _service(client: FakeRecognitionClient, food_service) -> FoodInputService:
    return FoodInputService(
        client=client,
        food_service=food_service,
        text_model="text-model",
        image_model="image-model",
    )


def test_recognize_text_returns_first_item(food_service) -> None:
    client = FakeRecognitionClient()

    result = asyncio.run(
        _service(client, food_service).recognize_text("two scrambled eggs")
    )

    assert not result.is_fallback
    assert result.confidence == 0.9
    assert result.item.name == "Scrambled Eggs"
    assert result.saved_food is None
    assert client.calls[0]["model"] == "text-model"
    assert "two scrambled eggs" in client.calls[0]["text"]
    assert client.calls[0]["image_data_url"] is None


def test_recognize_text_can_save_to_catalog(food_service) -> None:
    result = asyncio.run(
        _service(FakeRecognitionClient(), food_service).recognize_text(
            "eggs", save=True
        )
    )

    saved = result.saved_food
    assert saved is not None
    assert saved.is_custom
    assert saved.category == FoodCategory.PROTEIN
    assert saved.nutrition_per_100g.calories == 182
    assert asyncio.run(food_service.search("scrambled")) == [saved]


def test_unusable_output_yields_placeholder(food_service) -> None:
    client = FakeRecognitionClient(output="Sorry, I can't help with that.")

    service = _service(client, food_service)
    result = asyncio.run(service.recognize_text("???", save=True))

    assert result.is_fallback
    assert result.confidence == 0.0
    assert result.item == PLACEHOLDER_FOOD
    assert result.saved_food is None


def test_client_failure_raises_recognition_error(food_service) -> None:
    client = FakeRecognitionClient(error=TimeoutError("slow"))

    with pytest.raises(FoodRecognitionError):
        asyncio.run(_service(client, food_service).recognize_text("an apple"))


def test_empty_input_is_rejected(food_service) -> None:
    service = _service(FakeRecognitionClient(), food_service)

    with pytest.raises(ValueError, match="Input is empty"):
        asyncio.run(service.recognize_text("   "))
    with pytest.raises(ValueError):
        asyncio.run(service.recognize_image(b""))


def test_recognize_image_sends_data_url(food_service) -> None:
    client = FakeRecognitionClient()
    png = b"\x89PNG\r\n\x1a\n" + b"0" * 16

    result = asyncio.run(_service(client, food_service).recognize_image(png))

    assert result.item.name == "Scrambled Eggs"
    assert client.calls[0]["model"] == "image-model"
    assert client.calls[0]["image_data_url"].startswith("data:image/png;base64,")


def test_parse_recognition_tolerates_fences_and_units() -> None:
    raw = (
        "Here you go:\n```json\n"
        '{"items": [{"name": "Latte", "calories": "54 kcal", "protein": "3g",'
        ' "sodium": "40mg"}]}\n```'
    )

    items = parse_recognition(raw)

    assert items[0].name == "Latte"
    assert items[0].calories == 54
    assert items[0].protein == 3
    assert items[0].sodium == 40


def test_parse_recognition_rejects_garbage() -> None:
    assert parse_recognition("") == []
    assert parse_recognition("{not json}") == []
    assert parse_recognition('{"foods": []}') == []


def test_to_new_food_uses_single_100g_serving() -> None:
    food = to_new_food(
        RecognizedFood(name="Bagel", category="bread", serving_size="1 bagel")
    )

    assert food.category == FoodCategory.GRAIN
    assert [(serving.name, serving.weight) for serving in food.serving_sizes] == [
        ("1 bagel", 100)
    ]


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("fruit", FoodCategory.FRUIT),
        ("Iced Coffee", FoodCategory.BEVERAGE),
        ("Greek yogurt", FoodCategory.DAIRY),
        ("grilled chicken entree", FoodCategory.PROTEIN),
        ("chocolate cake", FoodCategory.SNACK),
        (None, FoodCategory.OTHER),
        ("mystery", FoodCategory.OTHER),
    ],
)
def test_map_category(label: str | None, expected: FoodCategory) -> None:
    assert map_category(label) == expected


def test_to_data_url_defaults_to_jpeg() -> None:
    assert to_data_url(b"\xff\xd8\xff").startswith("data:image/jpeg;base64,")

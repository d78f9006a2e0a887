"""Tests for the HTTP API."""

import base64
from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from nutrilog.api.app import create_app
from nutrilog.domain.nutrition import ActivityLevel, Gender, GoalType
from nutrilog.services.calculator import calculate_age, calculate_calorie_goal
from tests.conftest import (
    APPLE_ID,
    APPLE_MEDIUM_ID,
    BANANA_MEDIUM_ID,
    RUNNING_ID,
    TODAY,
)

PROFILE_BODY = {
    "email": "jo@example.com",
    "name": "Jo",
    "date_of_birth": "1990-05-20",
    "gender": "female",
    "height": 165,
    "current_weight": 62,
    "activity_level": "light",
    "goal_type": "maintain",
    "units": "imperial",
}


@pytest.fixture
def client(container) -> TestClient:
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def signed_in(client: TestClient, profile, identity_provider) -> TestClient:
    identity_provider.passwords[profile.email] = "s3cret!"
    response = client.post(
        "/auth/sign-in", json={"email": profile.email, "password": "s3cret!"}
    )
    assert response.status_code == 200
    return client


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_protected_routes_need_a_session(client: TestClient) -> None:
    response = client.get(f"/diary/{TODAY.isoformat()}")

    assert response.status_code == 401


def test_sign_in_links_existing_profile(signed_in: TestClient, profile) -> None:
    session = signed_in.get("/session").json()["session"]

    assert session["user_id"] == str(profile.id)
    assert session["has_completed_onboarding"]
    assert signed_in.get("/profile").json()["profile"]["name"] == "Alex"


def test_wrong_password_is_unauthorized(client: TestClient, profile) -> None:
    response = client.post(
        "/auth/sign-in", json={"email": profile.email, "password": "nope"}
    )

    assert response.status_code == 401
    assert "Failed to sign in" in response.json()["detail"]


def test_sign_up_then_onboard(client: TestClient) -> None:
    signup = client.post(
        "/auth/sign-up", json={"email": "jo@example.com", "password": "pw123456"}
    )
    assert signup.json()["result"]["confirmation_required"]

    confirmed = client.post(
        "/auth/confirm", json={"email": "jo@example.com", "code": "123456"}
    ).json()
    assert confirmed["profile"] is None
    assert confirmed["session"]["user_id"] is None
    assert client.get("/profile").status_code == 401

    created = client.post("/profile", json=PROFILE_BODY)
    assert created.status_code == 201
    profile = created.json()["profile"]
    assert profile["goals"]["calorie_goal"] == calculate_calorie_goal(
        weight_kg=62,
        height_cm=165,
        age=calculate_age(date(1990, 5, 20)),
        gender=Gender.FEMALE,
        activity_level=ActivityLevel.LIGHT,
        goal_type=GoalType.MAINTAIN,
    )
    assert client.get("/settings").json()["settings"]["units"] == "imperial"
    assert client.get("/profile").json()["profile"]["id"] == profile["id"]


def test_profile_validation(client: TestClient) -> None:
    response = client.post("/profile", json={**PROFILE_BODY, "height": -10})

    assert response.status_code == 422


def test_profile_update_and_goals(signed_in: TestClient) -> None:
    response = signed_in.patch(
        "/profile",
        json={
            "calorie_goal": 2000,
            "macro_ratios": {"protein": 30, "carbs": 40, "fat": 30},
            "target_weight": None,
        },
    )
    assert response.status_code == 200
    assert response.json()["profile"]["goals"]["target_weight"] is None

    goals = signed_in.get("/profile/goals").json()["goals"]
    assert (goals["protein"], goals["carbs"], goals["fat"]) == (150, 200, 67)


def test_diary_entry_flow(signed_in: TestClient) -> None:
    entry_id = str(uuid4())
    body = {
        "meal_type": "breakfast",
        "food_id": str(APPLE_ID),
        "serving_size_id": str(APPLE_MEDIUM_ID),
        "quantity": 2,
        "entry_id": entry_id,
    }
    url = f"/diary/{TODAY.isoformat()}"

    first = signed_in.post(f"{url}/entries", json=body)
    repeat = signed_in.post(f"{url}/entries", json=body)

    assert first.status_code == 201
    assert first.json()["day"]["total_nutrition"]["calories"] == 156
    assert repeat.json()["day"]["total_nutrition"]["calories"] == 156
    recent = signed_in.get("/foods/recent").json()["foods"]
    assert [item["id"] for item in recent] == [str(APPLE_ID)]

    updated = signed_in.patch(f"{url}/entries/{entry_id}", json={"quantity": 1})
    assert updated.json()["day"]["total_nutrition"]["calories"] == 78

    deleted = signed_in.delete(f"{url}/entries/{entry_id}")
    assert deleted.json()["day"]["total_nutrition"]["calories"] == 0
    assert signed_in.delete(f"{url}/entries/{entry_id}").status_code == 404


def test_diary_rejects_bad_entries(signed_in: TestClient) -> None:
    url = f"/diary/{TODAY.isoformat()}/entries"
    body = {
        "meal_type": "lunch",
        "food_id": str(APPLE_ID),
        "serving_size_id": str(APPLE_MEDIUM_ID),
        "quantity": 0,
    }

    assert signed_in.post(url, json=body).status_code == 422
    mismatched = {**body, "quantity": 1, "serving_size_id": str(BANANA_MEDIUM_ID)}
    assert signed_in.post(url, json=mismatched).status_code == 400
    unknown = {**body, "quantity": 1, "food_id": str(uuid4())}
    assert signed_in.post(url, json=unknown).status_code == 404


def test_water_and_summaries(signed_in: TestClient, profile) -> None:
    url = f"/diary/{TODAY.isoformat()}"

    water = signed_in.put(f"{url}/water", json={"amount": 1250})
    summary = signed_in.get(f"{url}/summary").json()["summary"]
    week = signed_in.get(f"{url}/week").json()["week"]

    assert water.json()["day"]["water_intake"] == 1250
    assert signed_in.put(f"{url}/water", json={"amount": -5}).status_code == 422
    assert summary["calorie_goal"] == profile.goals.calorie_goal
    assert len(week["days"]) == 7
    assert signed_in.get(f"{url}/totals").json()["totals"]["calories"] == 0


def test_food_catalog_endpoints(signed_in: TestClient) -> None:
    created = signed_in.post(
        "/foods",
        json={
            "name": "Protein Bar",
            "category": "snack",
            "nutrition_per_100g": {"calories": 380, "protein": 33},
            "serving_sizes": [{"name": "1 bar", "weight": 60, "unit": "piece"}],
        },
    )
    assert created.status_code == 201
    food_id = created.json()["food"]["id"]

    found = signed_in.get("/foods/search", params={"q": "protein"}).json()["foods"]
    assert [food["id"] for food in found] == [food_id]
    assert signed_in.get(f"/foods/{food_id}").json()["food"]["name"] == "Protein Bar"
    assert signed_in.get(f"/foods/{uuid4()}").status_code == 404

    signed_in.put(f"/foods/{food_id}/favorite")
    favorites = signed_in.get("/foods/favorites").json()["foods"]
    assert [food["id"] for food in favorites] == [food_id]
    signed_in.delete(f"/foods/{food_id}/favorite")
    assert signed_in.get("/foods/favorites").json()["foods"] == []


def test_remote_lookup_and_import(client: TestClient) -> None:
    hits = client.get("/foods/remote/search", params={"q": "yogurt"}).json()["foods"]
    imported = client.post("/foods/remote/123456/import", json={"category": "dairy"})

    assert hits[0]["fdc_id"] == 123456
    assert imported.status_code == 201
    assert imported.json()["food"]["category"] == "dairy"


def test_remote_lookup_disabled(container) -> None:
    container.food_lookup_service = None

    with TestClient(create_app(container)) as client:
        response = client.get("/foods/remote/search", params={"q": "yogurt"})

    assert response.status_code == 404


def test_workout_endpoints(signed_in: TestClient) -> None:
    created = signed_in.post(
        "/workouts",
        json={
            "day": TODAY.isoformat(),
            "exercises": [{"exercise_id": str(RUNNING_ID), "duration": 30}],
        },
    )
    assert created.status_code == 201
    workout = created.json()["workout"]
    assert workout["calories_burned"] == 320

    listed = signed_in.get(
        "/workouts", params={"start": TODAY.isoformat(), "end": TODAY.isoformat()}
    ).json()["workouts"]
    assert [item["id"] for item in listed] == [workout["id"]]
    assert len(signed_in.get("/workouts/exercises").json()["exercises"]) == 5

    assert signed_in.delete(f"/workouts/{workout['id']}").status_code == 200
    assert signed_in.get(f"/workouts/{workout['id']}").status_code == 404


def test_empty_workout_is_rejected(signed_in: TestClient) -> None:
    response = signed_in.post(
        "/workouts", json={"day": TODAY.isoformat(), "exercises": []}
    )

    assert response.status_code == 422


def test_weight_endpoints(signed_in: TestClient) -> None:
    created = signed_in.post("/weight", json={"weight": 77.5})
    progress = signed_in.get("/weight/progress").json()["progress"]
    entries = signed_in.get("/weight").json()["entries"]

    assert created.status_code == 201
    assert [entry["weight"] for entry in entries] == [77.5]
    assert progress["current_weight"] == 77.5
    assert signed_in.get("/profile").json()["profile"]["current_weight"] == 77.5


def test_food_input_text(client: TestClient) -> None:
    response = client.post("/food-input/text", json={"text": "two eggs"})

    result = response.json()["result"]
    assert result["item"]["name"] == "Scrambled Eggs"
    assert result["is_fallback"] is False


def test_food_input_image(client: TestClient, recognition_client) -> None:
    encoded = base64.b64encode(b"\xff\xd8\xffimage").decode()

    response = client.post(
        "/food-input/image",
        json={"image_base64": f"data:image/jpeg;base64,{encoded}"},
    )

    assert response.status_code == 200
    assert recognition_client.calls[0]["image_data_url"].endswith(encoded)


def test_food_input_rejects_invalid_base64(client: TestClient) -> None:
    response = client.post("/food-input/image", json={"image_base64": "not base64!"})

    assert response.status_code == 400


def test_food_input_upstream_failure(client: TestClient, recognition_client) -> None:
    recognition_client.error = RuntimeError("down")

    response = client.post("/food-input/text", json={"text": "an apple"})

    assert response.status_code == 502


def test_settings_and_sign_out(signed_in: TestClient) -> None:
    response = signed_in.patch(
        "/settings",
        json={"theme": "dark", "notifications": {"workout_reminders": False}},
    )
    settings = response.json()["settings"]

    assert settings["theme"] == "dark"
    assert settings["notifications"]["workout_reminders"] is False
    assert settings["notifications"]["meal_reminders"] is True

    signed_in.post("/auth/sign-out")
    assert signed_in.get("/profile").status_code == 401


def test_delete_profile_resets_state(signed_in: TestClient) -> None:
    assert signed_in.delete("/profile").json() == {"status": "deleted"}

    assert signed_in.get("/session").json()["session"]["is_authenticated"] is False

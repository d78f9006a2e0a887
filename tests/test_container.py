"""Tests for container wiring."""

import asyncio

from nutrilog.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.daily_log_service is not None
    assert container.food_lookup_service is not None
    assert container.app_state.current_user_id is None
    asyncio.run(container.close_resources())


def test_food_lookup_is_optional(settings) -> None:
    container = build_container(settings.model_copy(update={"fdc_api_key": " "}))

    assert container.food_lookup_service is None
    asyncio.run(container.close_resources())

"""Tests for diary statistics."""

import asyncio
from datetime import timedelta
from uuid import uuid4

from nutrilog.domain.meals import MealType
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.domain.workouts import NewExerciseSet
from nutrilog.services.stats import StatsService
from tests.conftest import APPLE_ID, APPLE_MEDIUM_ID, RUNNING_ID, TODAY


def test_day_summary_without_log(profile, stats_service: StatsService) -> None:
    summary = asyncio.run(stats_service.get_day(profile.id, TODAY))

    assert summary.total == NutritionalInfo.zero()
    assert summary.calorie_goal == profile.goals.calorie_goal
    assert summary.calorie_progress == 0


def test_day_summary_progress(
    profile, stats_service: StatsService, daily_log_service
) -> None:
    asyncio.run(
        daily_log_service.add_food_entry(
            profile.id, TODAY, MealType.LUNCH, APPLE_ID, APPLE_MEDIUM_ID, 10
        )
    )

    summary = asyncio.run(stats_service.get_day(profile.id, TODAY))

    assert summary.total.calories == 780
    assert summary.calorie_progress == 35


def test_week_averages_over_seven_days(
    profile, stats_service: StatsService, daily_log_service, workout_service
) -> None:
    monday = TODAY - timedelta(days=TODAY.weekday())
    for day in (monday, monday + timedelta(days=3)):
        asyncio.run(
            daily_log_service.add_food_entry(
                profile.id, day, MealType.DINNER, APPLE_ID, APPLE_MEDIUM_ID, 3.5
            )
        )
    asyncio.run(
        workout_service.log_workout(
            profile.id, monday + timedelta(days=6), [NewExerciseSet(RUNNING_ID, 30)]
        )
    )
    asyncio.run(
        workout_service.log_workout(
            profile.id, monday + timedelta(days=7), [NewExerciseSet(RUNNING_ID, 30)]
        )
    )

    week = asyncio.run(stats_service.get_week(profile.id, TODAY))

    assert [summary.day for summary in week.days][0] == monday
    assert len(week.days) == 7
    assert [summary.total.calories for summary in week.days] == [
        273,
        0,
        0,
        273,
        0,
        0,
        0,
    ]
    assert week.averages.calories == 78
    assert week.averages.carbs == 21.0
    assert week.calories_burned == 320


def test_stats_for_unknown_user(stats_service: StatsService) -> None:
    assert asyncio.run(stats_service.get_day(uuid4(), TODAY)) is None
    assert asyncio.run(stats_service.get_week(uuid4(), TODAY)) is None

"""Statistics service for diaries and workouts."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from nutrilog.domain.meals import DailyNutrition
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.domain.stats import DaySummary, WeeklyAverages, WeekSummary
from nutrilog.services.calculator import (
    calculate_progress,
    round_half_up,
    sum_nutrition,
    week_dates,
)
from nutrilog.services.meals import DailyLogRepository
from nutrilog.services.users import UserRepository
from nutrilog.services.workouts import WorkoutRepository


@dataclass
class StatsService:
    """Service for computing weekly summaries."""

    daily_repository: DailyLogRepository
    workout_repository: WorkoutRepository
    user_repository: UserRepository

    async def get_day(self, user_id: UUID, day: date) -> DaySummary | None:
        """Return one day's totals and calorie-goal progress."""
        profile = await self.user_repository.get_user(user_id)
        if profile is None:
            return None
        daily = await self.daily_repository.get_daily(user_id, day)
        return _summarize_day(day, daily, profile.goals.calorie_goal)

    async def get_week(self, user_id: UUID, day: date) -> WeekSummary | None:
        """Return the Monday-based week containing ``day``."""
        profile = await self.user_repository.get_user(user_id)
        if profile is None:
            return None
        dates = week_dates(day)
        records = await self.daily_repository.list_daily(user_id, dates[0], dates[-1])
        by_date = {record.date: record for record in records}
        days = [
            _summarize_day(current, by_date.get(current), profile.goals.calorie_goal)
            for current in dates
        ]
        sessions = await self.workout_repository.list_sessions(
            user_id, dates[0], dates[-1]
        )
        return WeekSummary(
            days=days,
            averages=_average([summary.total for summary in days]),
            calories_burned=sum(session.calories_burned for session in sessions),
        )


def _summarize_day(
    day: date, daily: DailyNutrition | None, default_goal: int
) -> DaySummary:
    total = daily.total_nutrition if daily else NutritionalInfo.zero()
    calorie_goal = daily.calorie_goal if daily else default_goal
    return DaySummary(
        day=day,
        total=total,
        calorie_goal=calorie_goal,
        calorie_progress=calculate_progress(total.calories, calorie_goal),
    )


def _average(totals: list[NutritionalInfo]) -> WeeklyAverages:
    total_days = max(len(totals), 1)
    summed = sum_nutrition(totals)
    return WeeklyAverages(
        calories=round_half_up(summed.calories / total_days),
        protein=round_half_up(summed.protein / total_days, 1),
        carbs=round_half_up(summed.carbs / total_days, 1),
        fat=round_half_up(summed.fat / total_days, 1),
        fiber=round_half_up(summed.fiber / total_days, 1),
    )

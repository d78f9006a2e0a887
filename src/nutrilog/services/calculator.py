"""Energy, macro and portion arithmetic.

Every function here is pure and deterministic. Rounding is half-up, matching
the values already stored in existing diaries: calories, sodium and
cholesterol round to whole numbers, the other nutrients to one decimal.
"""

import math
from collections.abc import Iterable
from datetime import date, timedelta

from nutrilog.domain.meals import ConsumedFood
from nutrilog.domain.models import UserProfile
from nutrilog.domain.nutrition import (
    ActivityLevel,
    CustomNutritionGoals,
    Gender,
    GoalType,
    MacroRatios,
    NutritionalInfo,
)
from nutrilog.domain.workouts import Intensity, StrengthIntensity

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

INTENSITY_MULTIPLIERS: dict[Intensity, float] = {
    Intensity.LOW: 0.7,
    Intensity.MODERATE: 1.0,
    Intensity.HIGH: 1.3,
}

STRENGTH_MET_VALUES: dict[StrengthIntensity, float] = {
    StrengthIntensity.LIGHT: 3.0,
    StrengthIntensity.MODERATE: 6.0,
    StrengthIntensity.VIGOROUS: 8.0,
}

KCAL_PER_KG_FAT = 7700
MIN_CALORIE_GOAL = 1200
BUILD_MUSCLE_SURPLUS = 300
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9
FIBER_PER_1000_KCAL = 14
SODIUM_LIMIT_MG = 2300
CHOLESTEROL_LIMIT_MG = 300
LBS_PER_KG = 2.20462
CM_PER_FOOT = 30.48


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's Math.round, scaled to ``digits`` decimals."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _whole(value: float) -> float:
    return round_half_up(value)


def _tenth(value: float) -> float:
    return round_half_up(value, 1)


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Return the calendar-year difference between today and the birth date."""
    current = today or date.today()
    return current.year - date_of_birth.year


def calculate_bmr(
    weight_kg: float, height_cm: float, age: int, gender: Gender
) -> float:
    """Basal metabolic rate using the Mifflin-St Jeor equation."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == Gender.MALE:
        return base + 5
    return base - 161


def calculate_bmr_for_profile(profile: UserProfile, today: date | None = None) -> float:
    """BMR from a stored profile's current weight, height and birth year."""
    return calculate_bmr(
        profile.current_weight,
        profile.height,
        calculate_age(profile.date_of_birth, today),
        profile.gender,
    )


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> int:
    """Total daily energy expenditure, rounded to whole calories."""
    return int(_whole(bmr * ACTIVITY_MULTIPLIERS[activity_level]))


def calculate_calorie_goal(  # noqa: PLR0913
    *,
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: Gender,
    activity_level: ActivityLevel,
    goal_type: GoalType,
    weekly_weight_change: float | None = None,
) -> int:
    """Daily calorie goal for the user's goal type."""
    tdee = calculate_tdee(
        calculate_bmr(weight_kg, height_cm, age, gender), activity_level
    )
    weekly_change = weekly_weight_change or 0.0
    daily_delta = weekly_change * KCAL_PER_KG_FAT / 7
    if goal_type == GoalType.LOSE_WEIGHT:
        goal = max(MIN_CALORIE_GOAL, tdee - daily_delta)
    elif goal_type == GoalType.GAIN_WEIGHT:
        goal = tdee + daily_delta
    elif goal_type == GoalType.BUILD_MUSCLE:
        goal = tdee + BUILD_MUSCLE_SURPLUS
    else:
        goal = tdee
    return int(_whole(goal))


def calculate_calorie_goal_for_profile(
    profile: UserProfile, today: date | None = None
) -> int:
    """Calorie goal derived from a stored profile."""
    return calculate_calorie_goal(
        weight_kg=profile.current_weight,
        height_cm=profile.height,
        age=calculate_age(profile.date_of_birth, today),
        gender=profile.gender,
        activity_level=profile.activity_level,
        goal_type=profile.goals.goal_type,
        weekly_weight_change=profile.goals.weekly_weight_change,
    )


def calculate_macro_goals(calorie_goal: float, ratios: MacroRatios) -> NutritionalInfo:
    """Convert a calorie goal and macro split into daily gram targets.

    The percentages are used as given; making them add up to 100 is the
    caller's job. Fiber, sugar, sodium and cholesterol targets are general
    public-health defaults rather than personalized values.
    """
    protein_kcal = calorie_goal * ratios.protein / 100
    carbs_kcal = calorie_goal * ratios.carbs / 100
    fat_kcal = calorie_goal * ratios.fat / 100
    return NutritionalInfo(
        calories=calorie_goal,
        protein=_whole(protein_kcal / KCAL_PER_GRAM_PROTEIN),
        carbs=_whole(carbs_kcal / KCAL_PER_GRAM_CARBS),
        fat=_whole(fat_kcal / KCAL_PER_GRAM_FAT),
        fiber=_whole(calorie_goal / 1000 * FIBER_PER_1000_KCAL),
        sugar=_whole(calorie_goal * 0.1 / 4),
        sodium=SODIUM_LIMIT_MG,
        cholesterol=CHOLESTEROL_LIMIT_MG,
    )


def apply_custom_goals(
    goals: NutritionalInfo, custom: CustomNutritionGoals
) -> NutritionalInfo:
    """Replace default supplementary targets with the user's own, where set."""
    return NutritionalInfo(
        calories=goals.calories,
        protein=goals.protein,
        carbs=goals.carbs,
        fat=goals.fat,
        fiber=custom.fiber if custom.fiber is not None else goals.fiber,
        sugar=custom.sugar if custom.sugar is not None else goals.sugar,
        sodium=custom.sodium if custom.sodium is not None else goals.sodium,
        cholesterol=(
            custom.cholesterol if custom.cholesterol is not None else goals.cholesterol
        ),
    )


def calculate_nutrition_consumed(
    per_100g: NutritionalInfo, quantity: float, serving_weight: float
) -> NutritionalInfo:
    """Scale per-100g nutrition to ``quantity`` servings of ``serving_weight`` grams."""
    factor = quantity * serving_weight / 100
    return NutritionalInfo(
        calories=_whole(per_100g.calories * factor),
        protein=_tenth(per_100g.protein * factor),
        carbs=_tenth(per_100g.carbs * factor),
        fat=_tenth(per_100g.fat * factor),
        fiber=_tenth(per_100g.fiber * factor),
        sugar=_tenth(per_100g.sugar * factor),
        sodium=_whole(per_100g.sodium * factor),
        cholesterol=_whole(per_100g.cholesterol * factor),
    )


def sum_nutrition(records: Iterable[NutritionalInfo]) -> NutritionalInfo:
    """Add records field by field, rounding after every partial sum."""
    total = NutritionalInfo.zero()
    for record in records:
        total = NutritionalInfo(
            calories=_whole(total.calories + record.calories),
            protein=_tenth(total.protein + record.protein),
            carbs=_tenth(total.carbs + record.carbs),
            fat=_tenth(total.fat + record.fat),
            fiber=_tenth(total.fiber + record.fiber),
            sugar=_tenth(total.sugar + record.sugar),
            sodium=_whole(total.sodium + record.sodium),
            cholesterol=_whole(total.cholesterol + record.cholesterol),
        )
    return total


def calculate_total_nutrition(foods: Iterable[ConsumedFood]) -> NutritionalInfo:
    """Sum the nutrition snapshots of consumed foods."""
    return sum_nutrition(food.nutrition_consumed for food in foods)


def convert_weight(value: float, from_unit: str, to_unit: str) -> float:
    """Convert between ``kg`` and ``lbs`` with one decimal."""
    if from_unit == to_unit:
        return value
    if from_unit == "kg" and to_unit == "lbs":
        return _tenth(value * LBS_PER_KG)
    if from_unit == "lbs" and to_unit == "kg":
        return _tenth(value / LBS_PER_KG)
    return value


def convert_height(value: float, from_unit: str, to_unit: str) -> float:
    """Convert between ``cm`` and ``ft``; feet keep one decimal, cm are whole."""
    if from_unit == to_unit:
        return value
    if from_unit == "cm" and to_unit == "ft":
        return _tenth(value / CM_PER_FOOT)
    if from_unit == "ft" and to_unit == "cm":
        return _whole(value * CM_PER_FOOT)
    return value


def calculate_exercise_calories(
    met_value: float,
    weight_kg: float,
    duration_minutes: float,
    intensity: Intensity | None = None,
) -> int:
    """Calories burned: MET x body weight x hours, MET scaled by intensity."""
    met = met_value * INTENSITY_MULTIPLIERS[intensity] if intensity else met_value
    return int(_whole(met * weight_kg * (duration_minutes / 60)))


def calculate_strength_calories(
    weight_kg: float,
    duration_minutes: float,
    intensity: StrengthIntensity = StrengthIntensity.MODERATE,
) -> int:
    """Calories for strength training using generic MET values."""
    return calculate_exercise_calories(
        STRENGTH_MET_VALUES[intensity], weight_kg, duration_minutes
    )


def calculate_progress(current: float, goal: float) -> int:
    """Percent of goal reached, capped at 100."""
    if goal == 0:
        return 0
    return int(min(100, _whole(current / goal * 100)))


def is_goal_met(current: float, goal: float, tolerance: float = 0.1) -> bool:
    """Return True when ``current`` is within ``tolerance`` of ``goal``."""
    return goal * (1 - tolerance) <= current <= goal * (1 + tolerance)


def week_dates(day: date) -> list[date]:
    """Return the seven days of the Monday-based week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]

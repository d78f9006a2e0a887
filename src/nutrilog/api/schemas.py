"""Request bodies accepted by the HTTP API."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from nutrilog.domain.foods import (
    FoodCategory,
    MeasurementUnit,
    NewFoodItem,
    NewServingSize,
)
from nutrilog.domain.meals import MealType
from nutrilog.domain.models import (
    NewUserProfile,
    ThemeMode,
    UnitSystem,
    UserPreferences,
)
from nutrilog.domain.nutrition import (
    ActivityLevel,
    CustomNutritionGoals,
    Gender,
    GoalType,
    MacroRatios,
    NutritionalInfo,
)
from nutrilog.domain.workouts import (
    Intensity,
    NewExerciseSet,
    StrengthIntensity,
    StrengthSet,
)

_CLEARABLE_FIELDS = frozenset({"target_weight", "weekly_weight_change"})


class CredentialsRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class SignUpRequest(CredentialsRequest):
    attributes: dict[str, str] = Field(default_factory=dict)


class EmailRequest(BaseModel):
    email: str = Field(min_length=3)


class ConfirmationRequest(EmailRequest):
    code: str = Field(min_length=1)


class NewPasswordRequest(ConfirmationRequest):
    new_password: str = Field(min_length=1)


class AttributesRequest(BaseModel):
    attributes: dict[str, str]


class MacroRatiosModel(BaseModel):
    protein: float = Field(ge=0, le=100)
    carbs: float = Field(ge=0, le=100)
    fat: float = Field(ge=0, le=100)

    def to_domain(self) -> MacroRatios:
        return MacroRatios(protein=self.protein, carbs=self.carbs, fat=self.fat)


class CustomGoalsModel(BaseModel):
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)
    cholesterol: float | None = Field(default=None, ge=0)

    def to_domain(self) -> CustomNutritionGoals:
        return CustomNutritionGoals(**self.model_dump())


class ProfileCreateRequest(BaseModel):
    """Onboarding answers used to create the local profile."""

    email: str = Field(min_length=3)
    name: str = Field(min_length=1)
    date_of_birth: date
    gender: Gender
    height: float = Field(gt=0, le=300)
    current_weight: float = Field(gt=0, le=700)
    activity_level: ActivityLevel
    goal_type: GoalType
    target_weight: float | None = Field(default=None, gt=0, le=700)
    weekly_weight_change: float | None = Field(default=None, ge=0, le=2)
    calorie_goal: int | None = Field(default=None, gt=0)
    macro_ratios: MacroRatiosModel | None = None
    units: UnitSystem = UnitSystem.METRIC
    theme: ThemeMode = ThemeMode.SYSTEM

    def to_domain(self) -> NewUserProfile:
        optional: dict[str, object] = {}
        if self.macro_ratios is not None:
            optional["macro_ratios"] = self.macro_ratios.to_domain()
        return NewUserProfile(
            email=self.email,
            name=self.name,
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            height=self.height,
            current_weight=self.current_weight,
            activity_level=self.activity_level,
            goal_type=self.goal_type,
            target_weight=self.target_weight,
            weekly_weight_change=self.weekly_weight_change,
            calorie_goal=self.calorie_goal,
            preferences=UserPreferences(units=self.units, theme=self.theme),
            **optional,
        )


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; only the fields sent are applied."""

    name: str | None = Field(default=None, min_length=1)
    date_of_birth: date | None = None
    gender: Gender | None = None
    height: float | None = Field(default=None, gt=0, le=300)
    current_weight: float | None = Field(default=None, gt=0, le=700)
    activity_level: ActivityLevel | None = None
    goal_type: GoalType | None = None
    target_weight: float | None = Field(default=None, gt=0, le=700)
    weekly_weight_change: float | None = Field(default=None, ge=0, le=2)
    calorie_goal: int | None = Field(default=None, gt=0)
    macro_ratios: MacroRatiosModel | None = None
    custom_goals: CustomGoalsModel | None = None
    units: UnitSystem | None = None
    theme: ThemeMode | None = None

    def to_updates(self) -> dict[str, object]:
        updates: dict[str, object] = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in _CLEARABLE_FIELDS
        }
        if self.macro_ratios is not None:
            updates["macro_ratios"] = self.macro_ratios.to_domain()
        if self.custom_goals is not None:
            updates["custom_goals"] = self.custom_goals.to_domain()
        return updates


class NotificationToggles(BaseModel):
    enabled: bool | None = None
    meal_reminders: bool | None = None
    workout_reminders: bool | None = None


class SettingsUpdateRequest(BaseModel):
    theme: ThemeMode | None = None
    units: UnitSystem | None = None
    notifications: NotificationToggles | None = None


class NutritionModel(BaseModel):
    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)
    cholesterol: float = Field(default=0.0, ge=0)

    def to_domain(self) -> NutritionalInfo:
        return NutritionalInfo(**self.model_dump())


class ServingSizeModel(BaseModel):
    name: str = Field(min_length=1)
    weight: float = Field(gt=0)
    unit: MeasurementUnit = MeasurementUnit.G


class FoodCreateRequest(BaseModel):
    """A custom food described per 100 g."""

    name: str = Field(min_length=1)
    category: FoodCategory = FoodCategory.OTHER
    nutrition_per_100g: NutritionModel
    serving_sizes: list[ServingSizeModel] = Field(default_factory=list)
    brand: str | None = None
    barcode: str | None = None
    image_url: str | None = None

    def to_domain(self) -> NewFoodItem:
        return NewFoodItem(
            name=self.name,
            category=self.category,
            nutrition_per_100g=self.nutrition_per_100g.to_domain(),
            serving_sizes=[
                NewServingSize(item.name, item.weight, item.unit)
                for item in self.serving_sizes
            ],
            brand=self.brand,
            barcode=self.barcode,
            image_url=self.image_url,
        )


class FoodEntryRequest(BaseModel):
    meal_type: MealType
    food_id: UUID
    serving_size_id: UUID
    quantity: float = Field(gt=0)
    entry_id: UUID | None = None


class FoodEntryUpdateRequest(BaseModel):
    quantity: float | None = Field(default=None, gt=0)
    serving_size_id: UUID | None = None


class WaterIntakeRequest(BaseModel):
    amount: float = Field(ge=0)


class StrengthSetModel(BaseModel):
    reps: int = Field(ge=0)
    weight: float = Field(default=0.0, ge=0)
    rest_time: int | None = Field(default=None, ge=0)


class ExerciseSetModel(BaseModel):
    exercise_id: UUID
    duration: float | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)
    intensity: Intensity | None = None
    sets: list[StrengthSetModel] = Field(default_factory=list)

    def to_domain(self) -> NewExerciseSet:
        return NewExerciseSet(
            exercise_id=self.exercise_id,
            duration=self.duration,
            distance=self.distance,
            intensity=self.intensity,
            sets=[
                StrengthSet(
                    reps=item.reps, weight=item.weight, rest_time=item.rest_time
                )
                for item in self.sets
            ],
        )


class WorkoutRequest(BaseModel):
    day: date
    exercises: list[ExerciseSetModel] = Field(min_length=1)
    notes: str | None = None
    strength_intensity: StrengthIntensity = StrengthIntensity.MODERATE


class WeightEntryRequest(BaseModel):
    weight: float = Field(gt=0, le=700)
    day: date | None = None
    notes: str | None = None


class TextInputRequest(BaseModel):
    text: str = Field(min_length=1)
    save: bool = False


class ImageInputRequest(BaseModel):
    """A photo sent as base64, with or without a data URL prefix."""

    image_base64: str = Field(min_length=1)
    save: bool = False


class ImportFoodRequest(BaseModel):
    category: FoodCategory = FoodCategory.OTHER

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrilog.adapters.fdc_client import HttpxFdcClient
from nutrilog.adapters.openai_food_recognition_client import (
    OpenAIFoodRecognitionClient,
)
from nutrilog.adapters.sqlite_daily_log_repository import SqliteDailyLogRepository
from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.adapters.sqlite_food_repository import SqliteFoodRepository
from nutrilog.adapters.sqlite_state_repository import SqliteStateRepository
from nutrilog.adapters.sqlite_user_repository import SqliteUserRepository
from nutrilog.adapters.sqlite_weight_repository import SqliteWeightRepository
from nutrilog.adapters.sqlite_workout_repository import SqliteWorkoutRepository
from nutrilog.adapters.supabase_identity_provider import SupabaseIdentityProvider
from nutrilog.config import Settings
from nutrilog.services.app_state import AppStateController
from nutrilog.services.auth import AuthService
from nutrilog.services.cache import InMemoryCache
from nutrilog.services.food_input import FoodInputService
from nutrilog.services.food_lookup import FoodLookupService
from nutrilog.services.foods import FoodService
from nutrilog.services.meals import DailyLogService
from nutrilog.services.stats import StatsService
from nutrilog.services.users import UserService
from nutrilog.services.weight import WeightService
from nutrilog.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    database: SqliteDatabase
    app_state: AppStateController
    auth_service: AuthService
    user_service: UserService
    food_service: FoodService
    daily_log_service: DailyLogService
    stats_service: StatsService
    workout_service: WorkoutService
    weight_service: WeightService
    food_input_service: FoodInputService
    food_lookup_service: FoodLookupService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    database = SqliteDatabase(resolved_settings.database_path)
    user_repository = SqliteUserRepository(database)
    food_repository = SqliteFoodRepository(database)
    daily_log_repository = SqliteDailyLogRepository(database)
    workout_repository = SqliteWorkoutRepository(database)
    weight_repository = SqliteWeightRepository(database)
    state_repository = SqliteStateRepository(database)

    food_service = FoodService(food_repository)
    identity_provider = SupabaseIdentityProvider.create(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    recognition_client = OpenAIFoodRecognitionClient.create(
        resolved_settings.openai_api_key, store=resolved_settings.openai_store
    )
    fdc_client = (
        HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key or "",
            base_url=resolved_settings.fdc_base_url,
        )
        if resolved_settings.fdc_enabled
        else None
    )
    food_lookup_service = (
        FoodLookupService(
            fdc_client=fdc_client, cache=InMemoryCache(), food_service=food_service
        )
        if fdc_client is not None
        else None
    )

    async def close_resources() -> None:
        await recognition_client.close()
        if fdc_client is not None:
            await fdc_client.close()
        await database.close()

    return AppContainer(
        settings=resolved_settings,
        database=database,
        app_state=AppStateController(state_repository),
        auth_service=AuthService(identity_provider),
        user_service=UserService(user_repository),
        food_service=food_service,
        daily_log_service=DailyLogService(
            repository=daily_log_repository,
            food_repository=food_repository,
            user_repository=user_repository,
        ),
        stats_service=StatsService(
            daily_repository=daily_log_repository,
            workout_repository=workout_repository,
            user_repository=user_repository,
        ),
        workout_service=WorkoutService(
            repository=workout_repository,
            user_repository=user_repository,
            weight_repository=weight_repository,
        ),
        weight_service=WeightService(
            repository=weight_repository, user_repository=user_repository
        ),
        food_input_service=FoodInputService(
            client=recognition_client,
            food_service=food_service,
            text_model=resolved_settings.openai_text_model,
            image_model=resolved_settings.openai_image_model,
        ),
        food_lookup_service=food_lookup_service,
        close_resources=close_resources,
    )

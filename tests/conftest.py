"""Shared test fixtures."""

import asyncio
import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date

import pytest

from nutrilog.adapters.sqlite_daily_log_repository import SqliteDailyLogRepository
from nutrilog.adapters.sqlite_database import SqliteDatabase, seed_id
from nutrilog.adapters.sqlite_food_repository import SqliteFoodRepository
from nutrilog.adapters.sqlite_state_repository import SqliteStateRepository
from nutrilog.adapters.sqlite_user_repository import SqliteUserRepository
from nutrilog.adapters.sqlite_weight_repository import SqliteWeightRepository
from nutrilog.adapters.sqlite_workout_repository import SqliteWorkoutRepository
from nutrilog.config import Settings
from nutrilog.containers import AppContainer
from nutrilog.domain.auth import AuthSession, SignUpResult
from nutrilog.domain.models import NewUserProfile, UserProfile
from nutrilog.domain.nutrition import ActivityLevel, Gender, GoalType
from nutrilog.services.app_state import AppStateController
from nutrilog.services.auth import AuthService, IdentityProvider
from nutrilog.services.cache import InMemoryCache
from nutrilog.services.food_input import FoodInputService, FoodRecognitionClient
from nutrilog.services.food_lookup import FdcClient, FoodLookupService
from nutrilog.services.foods import FoodService
from nutrilog.services.meals import DailyLogService
from nutrilog.services.stats import StatsService
from nutrilog.services.users import UserService
from nutrilog.services.weight import WeightService
from nutrilog.services.workouts import WorkoutService

APPLE_ID = seed_id("food", "apple")
APPLE_MEDIUM_ID = seed_id("serving", "apple-piece")
APPLE_100G_ID = seed_id("serving", "apple-g")
BANANA_ID = seed_id("food", "banana")
BANANA_MEDIUM_ID = seed_id("serving", "banana-piece")
RUNNING_ID = seed_id("exercise", "running")
PUSHUPS_ID = seed_id("exercise", "pushups")

TODAY = date(2024, 6, 12)


@dataclass
class FakeRecognitionClient(FoodRecognitionClient):
    """Fake recognition client returning a fixed payload."""

    output: str = field(
        default_factory=lambda: json.dumps(
            {
                "items": [
                    {
                        "name": "Scrambled Eggs",
                        "brand": None,
                        "category": "protein",
                        "serving_size": "2 eggs",
                        "calories": 182,
                        "protein": 12.2,
                        "carbs": 1.6,
                        "fat": 13.4,
                        "fiber": 0,
                        "sugar": 1.4,
                        "sodium": 188,
                    }
                ]
            }
        )
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def recognize(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> str:
        self.calls.append(
            {"model": model, "text": text, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.output

    async def close(self) -> None:
        return None


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """In-memory identity provider."""

    passwords: dict[str, str] = field(default_factory=dict)
    pending_codes: dict[str, str] = field(default_factory=dict)
    attributes: dict[str, str] = field(default_factory=dict)
    events: list[str] = field(default_factory=list)

    def sign_up(
        self, email: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        if email in self.passwords:
            raise RuntimeError("User already registered")
        self.passwords[email] = password
        self.pending_codes[email] = "123456"
        self.attributes.update(attributes)
        return SignUpResult(subject=f"sub-{email}", confirmation_required=True)

    def confirm_sign_up(self, email: str, code: str) -> AuthSession:
        if self.pending_codes.get(email) != code:
            raise RuntimeError("Invalid code")
        del self.pending_codes[email]
        return self._session(email)

    def sign_in(self, email: str, password: str) -> AuthSession:
        if self.passwords.get(email) != password or email in self.pending_codes:
            raise RuntimeError("Invalid login credentials")
        return self._session(email)

    def sign_out(self) -> None:
        self.events.append("sign_out")

    def forgot_password(self, email: str) -> None:
        self.pending_codes[email] = "654321"
        self.events.append(f"forgot:{email}")

    def confirm_new_password(self, email: str, code: str, new_password: str) -> None:
        if self.pending_codes.get(email) != code:
            raise RuntimeError("Invalid code")
        del self.pending_codes[email]
        self.passwords[email] = new_password

    def resend_confirmation_code(self, email: str) -> None:
        self.events.append(f"resend:{email}")

    def update_attributes(self, attributes: dict[str, str]) -> None:
        self.attributes.update(attributes)

    @staticmethod
    def _session(email: str) -> AuthSession:
        return AuthSession(
            subject=f"sub-{email}",
            email=email,
            access_token="access-token",
            refresh_token="refresh-token",
        )


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 123456,
                    "description": "Greek Yogurt, Plain",
                    "brandOwner": "Fage",
                    "brandName": "Total",
                    "dataType": "Branded",
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 123456,
            "description": "Greek Yogurt, Plain",
            "brandOwner": "Fage",
            "brandName": "Total",
            "dataType": "Branded",
            "gtinUpc": "0689544080367",
            "servingSize": 170,
            "servingSizeUnit": "g",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 97},
                {"nutrient": {"id": 1003}, "amount": 9},
                {"nutrient": {"id": 1004}, "amount": 5},
                {"nutrient": {"id": 1005}, "amount": 3.9},
                {"nutrient": {"id": 2000}, "amount": 3.5},
                {"nutrient": {"id": 1093}, "amount": 35},
                {"nutrient": {"id": 1253}, "amount": 13},
            ],
        }
    )
    search_calls: int = 0
    food_calls: int = 0
    failures_remaining: int = 0

    async def search_foods(
        self, query: str, page_size: int = 10, data_types: list[str] | None = None
    ) -> dict[str, object]:
        self.search_calls += 1
        self._maybe_fail()
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        self._maybe_fail()
        return self.food_payload

    async def close(self) -> None:
        return None

    def _maybe_fail(self) -> None:
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise RuntimeError("FDC unavailable")


def new_profile(**overrides: object) -> NewUserProfile:
    values: dict[str, object] = {
        "email": "alex@example.com",
        "name": "Alex",
        "date_of_birth": date(1994, 3, 1),
        "gender": Gender.MALE,
        "height": 180,
        "current_weight": 80,
        "activity_level": ActivityLevel.MODERATE,
        "goal_type": GoalType.LOSE_WEIGHT,
        "target_weight": 75,
        "weekly_weight_change": 0.5,
    }
    values.update(overrides)
    return NewUserProfile(**values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_path=str(tmp_path / "nutrilog.db"),
        supabase_url="https://example.supabase.co",
        supabase_anon_key="test.anon.key",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def database(settings: Settings) -> Iterator[SqliteDatabase]:
    db = SqliteDatabase(settings.database_path)
    asyncio.run(db.initialize())
    yield db
    asyncio.run(db.close())


@pytest.fixture
def user_repository(database: SqliteDatabase) -> SqliteUserRepository:
    return SqliteUserRepository(database)


@pytest.fixture
def food_repository(database: SqliteDatabase) -> SqliteFoodRepository:
    return SqliteFoodRepository(database)


@pytest.fixture
def daily_log_repository(database: SqliteDatabase) -> SqliteDailyLogRepository:
    return SqliteDailyLogRepository(database)


@pytest.fixture
def weight_repository(database: SqliteDatabase) -> SqliteWeightRepository:
    return SqliteWeightRepository(database)


@pytest.fixture
def workout_repository(database: SqliteDatabase) -> SqliteWorkoutRepository:
    return SqliteWorkoutRepository(database)


@pytest.fixture
def state_repository(database: SqliteDatabase) -> SqliteStateRepository:
    return SqliteStateRepository(database)


@pytest.fixture
def user_service(user_repository: SqliteUserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def food_service(food_repository: SqliteFoodRepository) -> FoodService:
    return FoodService(food_repository)


@pytest.fixture
def daily_log_service(
    daily_log_repository: SqliteDailyLogRepository,
    food_repository: SqliteFoodRepository,
    user_repository: SqliteUserRepository,
) -> DailyLogService:
    return DailyLogService(
        repository=daily_log_repository,
        food_repository=food_repository,
        user_repository=user_repository,
    )


@pytest.fixture
def weight_service(
    weight_repository: SqliteWeightRepository,
    user_repository: SqliteUserRepository,
) -> WeightService:
    return WeightService(repository=weight_repository, user_repository=user_repository)


@pytest.fixture
def workout_service(
    workout_repository: SqliteWorkoutRepository,
    user_repository: SqliteUserRepository,
    weight_repository: SqliteWeightRepository,
) -> WorkoutService:
    return WorkoutService(
        repository=workout_repository,
        user_repository=user_repository,
        weight_repository=weight_repository,
    )


@pytest.fixture
def stats_service(
    daily_log_repository: SqliteDailyLogRepository,
    workout_repository: SqliteWorkoutRepository,
    user_repository: SqliteUserRepository,
) -> StatsService:
    return StatsService(
        daily_repository=daily_log_repository,
        workout_repository=workout_repository,
        user_repository=user_repository,
    )


@pytest.fixture
def profile(user_service: UserService) -> UserProfile:
    return asyncio.run(user_service.create_profile(new_profile(), today=TODAY))


@pytest.fixture
def recognition_client() -> FakeRecognitionClient:
    return FakeRecognitionClient()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    database: SqliteDatabase,
    state_repository: SqliteStateRepository,
    user_service: UserService,
    food_service: FoodService,
    daily_log_service: DailyLogService,
    stats_service: StatsService,
    workout_service: WorkoutService,
    weight_service: WeightService,
    recognition_client: FakeRecognitionClient,
    identity_provider: FakeIdentityProvider,
    fdc_client: FakeFdcClient,
) -> AppContainer:
    async def close_resources() -> None:
        await database.close()

    return AppContainer(
        settings=settings,
        database=database,
        app_state=AppStateController(state_repository),
        auth_service=AuthService(identity_provider),
        user_service=user_service,
        food_service=food_service,
        daily_log_service=daily_log_service,
        stats_service=stats_service,
        workout_service=workout_service,
        weight_service=weight_service,
        food_input_service=FoodInputService(
            client=recognition_client,
            food_service=food_service,
            text_model=settings.openai_text_model,
            image_model=settings.openai_image_model,
        ),
        food_lookup_service=FoodLookupService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            food_service=food_service,
            retry_delay_seconds=0,
        ),
        close_resources=close_resources,
    )

"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from menu_personalizer.config import Settings
from menu_personalizer.containers import AppContainer
from menu_personalizer.domain.context import (
    AchievementProgress,
    MainGoal,
    MealEntry,
    NutritionGoals,
    PerformanceMetrics,
    StreakData,
    Trend,
    UserContext,
    UserProfile,
    WaterEntry,
)
from menu_personalizer.domain.errors import (
    GenerationFailedError,
    GenerationUnavailableError,
)
from menu_personalizer.domain.menus import MealPlan, MenuRecord, MenuReview, Questionnaire
from menu_personalizer.domain.targets import NutritionPlanBaseline
from menu_personalizer.services.context import ContextRepository, ContextService
from menu_personalizer.services.generation import GenerationClient
from menu_personalizer.services.menus import MenuRepository, MenuService

NOW = datetime(2026, 3, 16, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryContextRepository(ContextRepository):
    """In-memory context repository for tests."""

    questionnaires: dict[UUID, Questionnaire] = field(default_factory=dict)
    baselines: dict[UUID, NutritionPlanBaseline] = field(default_factory=dict)
    meals: dict[UUID, list[MealEntry]] = field(default_factory=dict)
    water: dict[UUID, list[WaterEntry]] = field(default_factory=dict)
    achievements: dict[UUID, list[AchievementProgress]] = field(default_factory=dict)
    reviews: dict[UUID, MenuReview] = field(default_factory=dict)
    fail_history: bool = False

    def get_latest_questionnaire(self, user_id: UUID) -> Questionnaire | None:
        return self.questionnaires.get(user_id)

    def get_latest_nutrition_plan(
        self, user_id: UUID
    ) -> NutritionPlanBaseline | None:
        return self.baselines.get(user_id)

    def list_meal_entries(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        if self.fail_history:
            raise RuntimeError("meals table unavailable")
        return [m for m in self.meals.get(user_id, []) if m.logged_at >= since]

    def list_water_entries(self, user_id: UUID, since: datetime) -> list[WaterEntry]:
        return [w for w in self.water.get(user_id, []) if w.day >= since.date()]

    def list_achievements(self, user_id: UUID) -> list[AchievementProgress]:
        return self.achievements.get(user_id, [])

    def get_latest_menu_review(self, user_id: UUID) -> MenuReview | None:
        return self.reviews.get(user_id)


@dataclass
class InMemoryMenuRepository(MenuRepository):
    """In-memory menu repository for tests."""

    menus: list[MealPlan] = field(default_factory=list)
    fail_writes: bool = False

    def create_menu(self, record: MenuRecord) -> MealPlan:
        if self.fail_writes:
            raise RuntimeError("Failed to create menu")
        plan = MealPlan(
            menu_id=uuid4(),
            user_id=record.user_id,
            title=record.title,
            description=record.description,
            total_days=record.total_days,
            start_date=record.start_date,
            end_date=record.end_date,
            days=record.days,
            generation_source=record.generation_source,
            dietary_category=record.dietary_category,
            totals=record.totals,
            adjusted_targets=record.adjusted_targets,
            context_snapshot=record.context_snapshot,
            schema_version=record.schema_version,
            created_at=datetime.now(tz=UTC),
        )
        self.menus.append(plan)
        return plan

    def get_menu(self, user_id: UUID, menu_id: UUID) -> MealPlan | None:
        for plan in self.menus:
            if plan.user_id == user_id and plan.menu_id == menu_id:
                return plan
        return None

    def list_menus(self, user_id: UUID) -> list[MealPlan]:
        return [plan for plan in reversed(self.menus) if plan.user_id == user_id]

    def count_menus(self, user_id: UUID) -> int:
        return len(self.list_menus(user_id))

    def delete_menu(self, user_id: UUID, menu_id: UUID) -> bool:
        plan = self.get_menu(user_id, menu_id)
        if plan is None:
            return False
        self.menus.remove(plan)
        return True


@dataclass
class UnavailableGenerationClient(GenerationClient):
    """Generation client without a configured credential."""

    calls: int = 0

    async def generate(self, prompt: str, max_tokens: int) -> str:
        self.calls += 1
        raise GenerationUnavailableError("no API key")


@dataclass
class FailingGenerationClient(GenerationClient):
    """Generation client whose every call fails."""

    calls: int = 0

    async def generate(self, prompt: str, max_tokens: int) -> str:
        self.calls += 1
        raise GenerationFailedError("upstream returned 500")


@dataclass
class FixedTextGenerationClient(GenerationClient):
    """Generation client returning a fixed text and recording prompts."""

    text: str
    prompts: list[str] = field(default_factory=list)
    max_tokens: list[int] = field(default_factory=list)

    async def generate(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        return self.text


def make_questionnaire(user_id: UUID, **overrides: object) -> Questionnaire:
    """Return a completed questionnaire with sensible answers."""
    questionnaire = Questionnaire(
        user_id=user_id,
        age=32,
        gender="female",
        height_cm=168,
        weight_kg=64,
        target_weight_kg=60,
        main_goal="lose_weight",
        physical_activity_level="MODERATE",
        dietary_style="Regular",
        allergies=(),
        liked_foods=("salmon", "berries"),
        disliked_foods=(),
        available_cooking_methods=("oven", "stovetop"),
        daily_cooking_time="30 minutes",
        completed_at=NOW,
    )
    return replace(questionnaire, **overrides)


def make_context(  # noqa: PLR0913
    main_goal: MainGoal = MainGoal.MAINTAIN,
    achievement_rate: float = 0.8,
    consistency: float = 0.8,
    calories_trend: Trend = Trend.STABLE,
    streak: int = 0,
    goals: NutritionGoals | None = None,
) -> UserContext:
    """Return a context with controllable rule inputs."""
    profile = UserProfile(
        user_id=uuid4(),
        age=30,
        gender="male",
        weight_kg=80,
        height_cm=180,
        target_weight_kg=78,
        main_goal=main_goal,
        activity_level="MODERATE",
        dietary_style="Regular",
    )
    return UserContext(
        profile=profile,
        goals=goals
        or NutritionGoals(
            daily_calories=2000,
            daily_protein=150,
            daily_carbs=250,
            daily_fats=65,
            daily_water=2400,
        ),
        performance=PerformanceMetrics(
            overall_goal_achievement_rate=achievement_rate,
            consistency_score=consistency,
            calories_trend=calories_trend,
        ),
        streaks=StreakData(current_daily_streak=streak),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def context_repository(user_id: UUID) -> InMemoryContextRepository:
    repository = InMemoryContextRepository()
    repository.questionnaires[user_id] = make_questionnaire(user_id)
    repository.baselines[user_id] = NutritionPlanBaseline(
        goal_calories=1800, goal_protein_g=120, goal_carbs_g=200, goal_fats_g=60
    )
    return repository


@pytest.fixture
def menu_repository() -> InMemoryMenuRepository:
    return InMemoryMenuRepository()


@pytest.fixture
def generation_client() -> GenerationClient:
    return UnavailableGenerationClient()


@pytest.fixture
def menu_service(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    generation_client: GenerationClient,
) -> MenuService:
    return MenuService(
        context_service=ContextService(context_repository),
        generation_client=generation_client,
        repository=menu_repository,
    )


@pytest.fixture
def container(settings: Settings, menu_service: MenuService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        context_service=menu_service.context_service,
        menu_service=menu_service,
        close_resources=close_resources,
    )

"""Domain models for the user context snapshot."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class MainGoal(StrEnum):
    """Normalised primary goal from the questionnaire."""

    LOSE_WEIGHT = "lose_weight"
    GAIN_MUSCLE = "gain_muscle"
    MAINTAIN = "maintain"
    OTHER = "other"


class Trend(StrEnum):
    """Direction of a macro over the last two weeks."""

    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


_GOAL_ALIASES = {
    "lose_weight": MainGoal.LOSE_WEIGHT,
    "weight_loss": MainGoal.LOSE_WEIGHT,
    "gain_muscle": MainGoal.GAIN_MUSCLE,
    "build_muscle": MainGoal.GAIN_MUSCLE,
    "weight_gain": MainGoal.GAIN_MUSCLE,
    "gain_weight": MainGoal.GAIN_MUSCLE,
    "maintain": MainGoal.MAINTAIN,
    "maintain_weight": MainGoal.MAINTAIN,
}


def normalize_goal(raw: str | None) -> MainGoal:
    """Map a questionnaire goal value onto MainGoal."""
    if not raw:
        return MainGoal.MAINTAIN
    return _GOAL_ALIASES.get(raw.strip().lower(), MainGoal.OTHER)


@dataclass(frozen=True)
class MealEntry:
    """A meal the user logged."""

    logged_at: datetime
    name: str | None
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    meal_period: str | None = None


@dataclass(frozen=True)
class WaterEntry:
    """Water intake for one day, in cups of 250 ml."""

    day: date
    cups: int


@dataclass(frozen=True)
class AchievementProgress:
    """Progress of the user on one achievement."""

    title: str
    unlocked: bool
    progress: int
    max_progress: int
    points: int
    unlocked_at: datetime | None = None


@dataclass(frozen=True)
class UserProfile:
    """Profile fields taken from the questionnaire."""

    user_id: UUID
    age: int
    gender: str
    weight_kg: float
    height_cm: float
    target_weight_kg: float
    main_goal: MainGoal
    activity_level: str
    dietary_style: str
    allergies: tuple[str, ...] = ()
    medical_conditions: tuple[str, ...] = ()
    liked_foods: tuple[str, ...] = ()
    disliked_foods: tuple[str, ...] = ()
    kosher: bool = False
    cooking_methods: tuple[str, ...] = ()
    daily_cooking_time: str | None = None


@dataclass(frozen=True)
class NutritionGoals:
    """Daily targets currently set for the user."""

    daily_calories: float
    daily_protein: float
    daily_carbs: float
    daily_fats: float
    daily_water: int
    daily_fiber: float = 25
    meals_per_day: int = 3


@dataclass(frozen=True)
class PerformanceMetrics:
    """Rolling 30-day performance against goals."""

    avg_daily_calories: int = 0
    avg_daily_protein: int = 0
    avg_daily_carbs: int = 0
    avg_daily_fats: int = 0
    avg_daily_water: int = 0
    calorie_goal_achievement_rate: float = 0.0
    protein_goal_achievement_rate: float = 0.0
    water_goal_achievement_rate: float = 0.0
    overall_goal_achievement_rate: float = 0.0
    avg_meals_per_day: float = 0.0
    consistency_score: float = 0.0
    best_day_of_week: str = "Unknown"
    worst_day_of_week: str = "Unknown"
    calories_trend: Trend = Trend.STABLE
    protein_trend: Trend = Trend.STABLE
    carbs_trend: Trend = Trend.STABLE
    fat_trend: Trend = Trend.STABLE
    water_trend: Trend = Trend.STABLE


@dataclass(frozen=True)
class FrequentFood:
    """A meal name the user logs often."""

    name: str
    count: int
    avg_calories: int


@dataclass(frozen=True)
class MealPatterns:
    """Timing and food habits derived from logged meals."""

    preferred_breakfast_time: str = "08:00"
    preferred_lunch_time: str = "13:00"
    preferred_dinner_time: str = "19:00"
    frequent_foods: tuple[FrequentFood, ...] = ()
    most_common_proteins: tuple[str, ...] = ()
    most_common_carbs: tuple[str, ...] = ()
    average_meals_per_day: float = 0.0


@dataclass(frozen=True)
class StreakData:
    """Logging streaks."""

    current_daily_streak: int = 0
    longest_daily_streak: int = 0
    current_weekly_streak: int = 0
    total_active_days: int = 0
    last_active_date: date | None = None


@dataclass(frozen=True)
class HealthInsights:
    """Derived body and intake indicators."""

    bmi_category: str = "normal"
    estimated_bmr: int = 1500
    estimated_tdee: int = 2000
    recommended_adjustment: int = 0
    hydration_status: str = "adequate"
    protein_intake_status: str = "adequate"


@dataclass(frozen=True)
class AchievementSummary:
    """Gamification state."""

    total_unlocked: int = 0
    total_available: int = 0
    recently_unlocked: tuple[str, ...] = ()
    near_completion: tuple[str, ...] = ()
    total_xp: int = 0
    current_level: int = 1


@dataclass(frozen=True)
class UserContext:
    """Immutable snapshot of everything known about a user at generation time."""

    profile: UserProfile
    goals: NutritionGoals
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    meal_patterns: MealPatterns = field(default_factory=MealPatterns)
    streaks: StreakData = field(default_factory=StreakData)
    health_insights: HealthInsights = field(default_factory=HealthInsights)
    achievements: AchievementSummary = field(default_factory=AchievementSummary)
    data_completeness: int = 0
    built_at: datetime | None = None

    def to_snapshot(self) -> dict[str, object]:
        """Return a JSON-ready copy of the context."""
        return to_jsonable(asdict(self))


def to_jsonable(value: object) -> object:
    """Convert dataclass dumps into JSON-compatible primitives."""
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        items = [to_jsonable(item) for item in value]
        return sorted(items) if isinstance(value, set | frozenset) else items
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value

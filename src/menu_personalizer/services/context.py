"""User context aggregation for menu personalization."""

import logging
from collections import Counter
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from menu_personalizer.domain.context import (
    AchievementProgress,
    AchievementSummary,
    FrequentFood,
    HealthInsights,
    MainGoal,
    MealEntry,
    MealPatterns,
    NutritionGoals,
    PerformanceMetrics,
    StreakData,
    Trend,
    UserContext,
    UserProfile,
    WaterEntry,
    normalize_goal,
)
from menu_personalizer.domain.errors import PreconditionError
from menu_personalizer.domain.menus import MenuReview, Questionnaire
from menu_personalizer.domain.targets import NutritionPlanBaseline

_logger = logging.getLogger(__name__)

HISTORY_DAYS = 30
TREND_WINDOW_DAYS = 7
TREND_THRESHOLD = 0.1
CUP_ML = 250
WATER_ML_PER_KG = 30
MAX_ACHIEVEMENT_RATE = 1.5

_DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
_PROTEIN_KEYWORDS = (
    "chicken",
    "beef",
    "fish",
    "salmon",
    "tuna",
    "eggs",
    "tofu",
    "turkey",
    "pork",
    "lamb",
    "shrimp",
)
_CARB_KEYWORDS = (
    "rice",
    "pasta",
    "bread",
    "potato",
    "quinoa",
    "oats",
    "tortilla",
    "couscous",
    "noodles",
)
_ACTIVITY_MULTIPLIERS = {
    "SEDENTARY": 1.2,
    "LIGHT": 1.375,
    "LIGHTLY_ACTIVE": 1.375,
    "MODERATE": 1.55,
    "MODERATELY_ACTIVE": 1.55,
    "HIGH": 1.725,
    "VERY_ACTIVE": 1.725,
    "EXTREMELY_ACTIVE": 1.9,
}


class ContextRepository(Protocol):
    """Read-only access to the user data behind a context snapshot."""

    def get_latest_questionnaire(self, user_id: UUID) -> Questionnaire | None:
        """Return the most recently completed questionnaire."""

    def get_latest_nutrition_plan(
        self, user_id: UUID
    ) -> NutritionPlanBaseline | None:
        """Return the most recently created nutrition plan goals."""

    def list_meal_entries(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        """Return meals logged since the given time."""

    def list_water_entries(self, user_id: UUID, since: datetime) -> list[WaterEntry]:
        """Return daily water intake since the given time."""

    def list_achievements(self, user_id: UUID) -> list[AchievementProgress]:
        """Return achievement progress for the user."""

    def get_latest_menu_review(self, user_id: UUID) -> MenuReview | None:
        """Return the user's most recent menu review."""


@dataclass(frozen=True)
class GenerationInputs:
    """Everything the pipeline reads before computing targets."""

    questionnaire: Questionnaire
    baseline: NutritionPlanBaseline | None
    context: UserContext
    review: MenuReview | None = None
    history_loaded: bool = True


@dataclass
class ContextService:
    """Builds a fresh UserContext for each generation request."""

    repository: ContextRepository

    def fetch(self, user_id: UUID, now: datetime | None = None) -> GenerationInputs:
        """Load the questionnaire, baseline and context for a user."""
        questionnaire = self.repository.get_latest_questionnaire(user_id)
        if questionnaire is None:
            raise PreconditionError(
                "User questionnaire not found. "
                "Please complete the questionnaire first."
            )
        current = now or datetime.now(tz=UTC)
        baseline = self.repository.get_latest_nutrition_plan(user_id)
        try:
            since = current - timedelta(days=HISTORY_DAYS)
            meals = self.repository.list_meal_entries(user_id, since)
            water = self.repository.list_water_entries(user_id, since)
            achievements = self.repository.list_achievements(user_id)
            review = self.repository.get_latest_menu_review(user_id)
        except Exception:
            _logger.exception(
                "Failed to load history, using minimal context: user_id=%s", user_id
            )
            context = build_minimal_context(questionnaire, baseline, current)
            return GenerationInputs(
                questionnaire, baseline, context, history_loaded=False
            )

        context = build_context(
            questionnaire, baseline, meals, water, achievements, current
        )
        _logger.info(
            "Built user context: user_id=%s completeness=%s meals=%s",
            user_id,
            context.data_completeness,
            len(meals),
        )
        return GenerationInputs(questionnaire, baseline, context, review)


def build_context(  # noqa: PLR0913
    questionnaire: Questionnaire,
    baseline: NutritionPlanBaseline | None,
    meals: list[MealEntry],
    water: list[WaterEntry],
    achievements: list[AchievementProgress],
    now: datetime,
) -> UserContext:
    """Aggregate raw history rows into a context snapshot."""
    profile = build_profile(questionnaire)
    goals = build_goals(questionnaire, baseline)
    performance = compute_performance(meals, water, goals, now)
    patterns = compute_meal_patterns(meals)
    context = UserContext(
        profile=profile,
        goals=goals,
        performance=performance,
        meal_patterns=patterns,
        streaks=compute_streaks(meals, now.date()),
        health_insights=compute_health_insights(profile, goals, performance),
        achievements=summarize_achievements(achievements, now),
        built_at=now,
    )
    return replace(context, data_completeness=data_completeness(context))


def build_minimal_context(
    questionnaire: Questionnaire,
    baseline: NutritionPlanBaseline | None,
    now: datetime,
) -> UserContext:
    """Context built from the questionnaire alone."""
    return UserContext(
        profile=build_profile(questionnaire),
        goals=build_goals(questionnaire, baseline),
        data_completeness=10,
        built_at=now,
    )


def build_profile(questionnaire: Questionnaire) -> UserProfile:
    """Project questionnaire answers onto the profile."""
    weight = questionnaire.weight_kg or 70
    return UserProfile(
        user_id=questionnaire.user_id,
        age=questionnaire.age or 30,
        gender=questionnaire.gender or "unknown",
        weight_kg=weight,
        height_cm=questionnaire.height_cm or 170,
        target_weight_kg=questionnaire.target_weight_kg or weight,
        main_goal=normalize_goal(questionnaire.main_goal),
        activity_level=questionnaire.physical_activity_level or "MODERATE",
        dietary_style=questionnaire.dietary_style or "Regular",
        allergies=questionnaire.allergies,
        medical_conditions=questionnaire.medical_conditions,
        liked_foods=questionnaire.liked_foods,
        disliked_foods=questionnaire.disliked_foods,
        kosher=questionnaire.kosher,
        cooking_methods=questionnaire.available_cooking_methods,
        daily_cooking_time=questionnaire.daily_cooking_time,
    )


def build_goals(
    questionnaire: Questionnaire, baseline: NutritionPlanBaseline | None
) -> NutritionGoals:
    """Current daily goals, with defaults where nothing was saved."""
    plan = baseline or NutritionPlanBaseline()
    return NutritionGoals(
        daily_calories=plan.goal_calories or 2000,
        daily_protein=plan.goal_protein_g or 120,
        daily_carbs=plan.goal_carbs_g or 250,
        daily_fats=plan.goal_fats_g or 70,
        daily_water=round((questionnaire.weight_kg or 70) * WATER_ML_PER_KG),
        meals_per_day=questionnaire.meals_per_day or 3,
    )


@dataclass
class _DayTotals:
    calories: float = 0.0
    protein: float = 0.0
    meal_count: int = 0


def compute_performance(
    meals: list[MealEntry],
    water: list[WaterEntry],
    goals: NutritionGoals,
    now: datetime,
) -> PerformanceMetrics:
    """Averages, goal achievement, consistency and trends over the window."""
    by_day: dict[date, _DayTotals] = {}
    for meal in meals:
        totals = by_day.setdefault(meal.logged_at.astimezone(UTC).date(), _DayTotals())
        totals.calories += meal.calories
        totals.protein += meal.protein_g
        totals.meal_count += 1
    active_days = len(by_day) or 1

    avg_water = sum(entry.cups * CUP_ML for entry in water) / active_days
    calorie_rate = min(
        _goal_achievement([d.calories for d in by_day.values()], goals.daily_calories),
        MAX_ACHIEVEMENT_RATE,
    )
    protein_rate = min(
        _goal_achievement([d.protein for d in by_day.values()], goals.daily_protein),
        MAX_ACHIEVEMENT_RATE,
    )
    water_rate = min(avg_water / goals.daily_water, MAX_ACHIEVEMENT_RATE)
    overall = min((calorie_rate + protein_rate + water_rate) / 3, 1.0)
    best, worst = _day_of_week_extremes(by_day)

    recent_start = now - timedelta(days=TREND_WINDOW_DAYS)
    older_start = now - timedelta(days=TREND_WINDOW_DAYS * 2)
    recent = [meal for meal in meals if meal.logged_at >= recent_start]
    older = [meal for meal in meals if older_start <= meal.logged_at < recent_start]
    recent_water = [
        entry.cups for entry in water if entry.day >= recent_start.date()
    ]
    older_water = [
        entry.cups
        for entry in water
        if older_start.date() <= entry.day < recent_start.date()
    ]

    return PerformanceMetrics(
        avg_daily_calories=round(sum(m.calories for m in meals) / active_days),
        avg_daily_protein=round(sum(m.protein_g for m in meals) / active_days),
        avg_daily_carbs=round(sum(m.carbs_g for m in meals) / active_days),
        avg_daily_fats=round(sum(m.fats_g for m in meals) / active_days),
        avg_daily_water=round(avg_water),
        calorie_goal_achievement_rate=calorie_rate,
        protein_goal_achievement_rate=protein_rate,
        water_goal_achievement_rate=water_rate,
        overall_goal_achievement_rate=overall,
        avg_meals_per_day=len(meals) / active_days,
        consistency_score=_consistency([d.meal_count for d in by_day.values()]),
        best_day_of_week=best,
        worst_day_of_week=worst,
        calories_trend=determine_trend(
            _mean([m.calories for m in recent]), _mean([m.calories for m in older])
        ),
        protein_trend=determine_trend(
            _mean([m.protein_g for m in recent]), _mean([m.protein_g for m in older])
        ),
        carbs_trend=determine_trend(
            _mean([m.carbs_g for m in recent]), _mean([m.carbs_g for m in older])
        ),
        fat_trend=determine_trend(
            _mean([m.fats_g for m in recent]), _mean([m.fats_g for m in older])
        ),
        water_trend=determine_trend(_mean(recent_water), _mean(older_water)),
    )


def determine_trend(recent: float, older: float) -> Trend:
    """Compare two averages with a 10% dead band."""
    if older == 0:
        return Trend.STABLE
    change = (recent - older) / older
    if change > TREND_THRESHOLD:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def compute_streaks(meals: list[MealEntry], today: date) -> StreakData:
    """Current and longest runs of consecutive logging days."""
    active = {meal.logged_at.astimezone(UTC).date() for meal in meals}
    if not active:
        return StreakData()

    current = 0
    cursor = today if today in active else today - timedelta(days=1)
    while cursor in active and current <= HISTORY_DAYS:
        current += 1
        cursor -= timedelta(days=1)

    ordered = sorted(active)
    longest = run = 1
    for previous, day in zip(ordered, ordered[1:], strict=False):
        run = run + 1 if (day - previous).days == 1 else 1
        longest = max(longest, run)

    return StreakData(
        current_daily_streak=current,
        longest_daily_streak=longest,
        current_weekly_streak=current // 7,
        total_active_days=len(active),
        last_active_date=ordered[-1],
    )


def infer_meal_period(hour: int) -> str:
    """Guess the meal period from the hour it was logged."""
    if 5 <= hour < 11:  # noqa: PLR2004
        return "breakfast"
    if 11 <= hour < 15:  # noqa: PLR2004
        return "lunch"
    if 17 <= hour < 22:  # noqa: PLR2004
        return "dinner"
    return "snack"


def compute_meal_patterns(meals: list[MealEntry]) -> MealPatterns:
    """Preferred meal times and frequently eaten foods."""
    if not meals:
        return MealPatterns()

    times: dict[str, list[str]] = {"breakfast": [], "lunch": [], "dinner": []}
    names: Counter[str] = Counter()
    name_calories: dict[str, float] = {}
    for meal in meals:
        hour = meal.logged_at.hour
        period = (meal.meal_period or infer_meal_period(hour)).lower()
        if period in times:
            times[period].append(f"{hour:02d}:00")
        if meal.name:
            names[meal.name] += 1
            name_calories[meal.name] = name_calories.get(meal.name, 0.0) + meal.calories

    frequent = tuple(
        FrequentFood(
            name=name,
            count=count,
            avg_calories=round(name_calories[name] / count),
        )
        for name, count in names.most_common(10)
    )
    lowered = [food.name.lower() for food in frequent]
    active_days = {meal.logged_at.astimezone(UTC).date() for meal in meals}

    return MealPatterns(
        preferred_breakfast_time=_most_frequent(times["breakfast"]) or "08:00",
        preferred_lunch_time=_most_frequent(times["lunch"]) or "13:00",
        preferred_dinner_time=_most_frequent(times["dinner"]) or "19:00",
        frequent_foods=frequent,
        most_common_proteins=tuple(
            name for name in lowered if any(kw in name for kw in _PROTEIN_KEYWORDS)
        )[:5],
        most_common_carbs=tuple(
            name for name in lowered if any(kw in name for kw in _CARB_KEYWORDS)
        )[:5],
        average_meals_per_day=round(len(meals) / len(active_days), 1),
    )


def compute_health_insights(
    profile: UserProfile, goals: NutritionGoals, performance: PerformanceMetrics
) -> HealthInsights:
    """BMI, energy expenditure and intake status."""
    height_m = profile.height_cm / 100
    bmi = profile.weight_kg / (height_m * height_m)
    if bmi < 18.5:  # noqa: PLR2004
        bmi_category = "underweight"
    elif bmi < 25:  # noqa: PLR2004
        bmi_category = "normal"
    elif bmi < 30:  # noqa: PLR2004
        bmi_category = "overweight"
    else:
        bmi_category = "obese"

    # Mifflin-St Jeor
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    bmr += 5 if profile.gender.lower() == "male" else -161
    tdee = bmr * _ACTIVITY_MULTIPLIERS.get(profile.activity_level.upper(), 1.55)

    adjustment = 0
    if profile.main_goal == MainGoal.LOSE_WEIGHT:
        adjustment = -500
    elif profile.main_goal == MainGoal.GAIN_MUSCLE:
        adjustment = 300

    water_ratio = performance.avg_daily_water / goals.daily_water
    if water_ratio < 0.5:  # noqa: PLR2004
        hydration = "low"
    elif water_ratio < 0.75:  # noqa: PLR2004
        hydration = "adequate"
    elif water_ratio < 1:
        hydration = "good"
    else:
        hydration = "excellent"

    protein_per_kg = performance.avg_daily_protein / profile.weight_kg
    if protein_per_kg < 0.8:  # noqa: PLR2004
        protein_status = "low"
    elif protein_per_kg < 1.2:  # noqa: PLR2004
        protein_status = "adequate"
    elif protein_per_kg < 2:  # noqa: PLR2004
        protein_status = "optimal"
    else:
        protein_status = "high"

    return HealthInsights(
        bmi_category=bmi_category,
        estimated_bmr=round(bmr),
        estimated_tdee=round(tdee),
        recommended_adjustment=adjustment,
        hydration_status=hydration,
        protein_intake_status=protein_status,
    )


def summarize_achievements(
    achievements: list[AchievementProgress], now: datetime
) -> AchievementSummary:
    """Unlocked counts, nearly finished achievements and level."""
    unlocked = [a for a in achievements if a.unlocked]
    week_ago = now - timedelta(days=7)
    recent = tuple(
        a.title for a in unlocked if a.unlocked_at and a.unlocked_at >= week_ago
    )
    near = tuple(
        a.title
        for a in achievements
        if not a.unlocked
        and a.progress > 0
        and a.progress / max(a.max_progress, 1) >= 0.7  # noqa: PLR2004
    )[:5]
    xp = sum(a.points for a in unlocked)
    return AchievementSummary(
        total_unlocked=len(unlocked),
        total_available=len(achievements),
        recently_unlocked=recent,
        near_completion=near,
        total_xp=xp,
        current_level=xp // 1000 + 1,
    )


def data_completeness(context: UserContext) -> int:
    """Score from 0 to 100 describing how much data backs the context."""
    profile = context.profile
    checks = [
        (profile.age > 0, 5),
        (profile.weight_kg > 0, 5),
        (profile.height_cm > 0, 5),
        (profile.main_goal != MainGoal.MAINTAIN, 5),
        (profile.activity_level != "MODERATE", 5),
        (bool(profile.allergies) or profile.dietary_style != "Regular", 5),
        (bool(profile.liked_foods), 5),
        (bool(profile.disliked_foods), 5),
        (context.goals.daily_calories > 0, 10),
        (context.goals.daily_protein > 0, 10),
        (context.performance.avg_daily_calories > 0, 10),
        (context.performance.avg_meals_per_day > 0, 10),
        (context.performance.consistency_score > 0, 10),
        (bool(context.meal_patterns.frequent_foods), 10),
    ]
    return min(sum(points for passed, points in checks if passed), 100)


def _goal_achievement(values: list[float], target: float) -> float:
    if not values or target <= 0:
        return 0.0
    hits = [v for v in values if target * 0.8 <= v <= target * 1.2]
    return len(hits) / len(values)


def _consistency(meal_counts: list[int]) -> float:
    if len(meal_counts) < 2:  # noqa: PLR2004
        return 0.0
    average = sum(meal_counts) / len(meal_counts)
    consistent = [count for count in meal_counts if count >= average * 0.7]
    return len(consistent) / len(meal_counts)


def _day_of_week_extremes(by_day: dict[date, _DayTotals]) -> tuple[str, str]:
    calories_by_weekday: dict[str, list[float]] = {}
    for day, totals in by_day.items():
        calories_by_weekday.setdefault(_DAY_NAMES[day.weekday()], []).append(
            totals.calories
        )
    if not calories_by_weekday:
        return "Unknown", "Unknown"
    averages = {name: _mean(values) for name, values in calories_by_weekday.items()}
    return max(averages, key=averages.__getitem__), min(
        averages, key=averages.__getitem__
    )


def _most_frequent(values: list[str]) -> str | None:
    if not values:
        return None
    return Counter(values).most_common(1)[0][0]


def _mean(values: list[float] | list[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)

"""Tests for user context aggregation."""

import json
from datetime import timedelta
from uuid import uuid4

import pytest

from menu_personalizer.domain.context import MainGoal, MealEntry, Trend, WaterEntry
from menu_personalizer.domain.errors import PreconditionError
from menu_personalizer.domain.menus import MenuReview
from menu_personalizer.services.context import (
    ContextService,
    compute_streaks,
    determine_trend,
    infer_meal_period,
)
from tests.conftest import NOW, InMemoryContextRepository, make_questionnaire


def _meal(days_ago: int, calories: float, hour: int = 13, name: str = "Chicken rice") -> MealEntry:
    logged_at = (NOW - timedelta(days=days_ago)).replace(hour=hour)
    return MealEntry(
        logged_at=logged_at,
        name=name,
        calories=calories,
        protein_g=calories / 20,
        carbs_g=calories / 8,
        fats_g=calories / 30,
    )


def test_fetch_requires_questionnaire() -> None:
    service = ContextService(InMemoryContextRepository())

    with pytest.raises(PreconditionError):
        service.fetch(uuid4(), now=NOW)


def test_fetch_builds_context_from_history(
    context_repository: InMemoryContextRepository, user_id
) -> None:
    context_repository.meals[user_id] = [_meal(day, 1800) for day in range(10)]
    context_repository.water[user_id] = [
        WaterEntry(day=(NOW - timedelta(days=day)).date(), cups=8) for day in range(10)
    ]
    context_repository.reviews[user_id] = MenuReview(rating=4, liked="salmon")

    inputs = ContextService(context_repository).fetch(user_id, now=NOW)

    context = inputs.context
    assert inputs.history_loaded is True
    assert inputs.review == MenuReview(rating=4, liked="salmon")
    assert context.profile.main_goal == MainGoal.LOSE_WEIGHT
    assert context.goals.daily_calories == 1800
    assert context.streaks.current_daily_streak == 10
    assert context.performance.avg_daily_calories == 1800
    assert context.performance.calorie_goal_achievement_rate == 1.0
    assert context.meal_patterns.preferred_lunch_time == "13:00"
    assert context.meal_patterns.most_common_proteins == ("chicken rice",)
    assert context.built_at == NOW
    assert context.data_completeness > 10


def test_fetch_falls_back_to_minimal_context_when_history_fails(
    context_repository: InMemoryContextRepository, user_id
) -> None:
    context_repository.fail_history = True

    inputs = ContextService(context_repository).fetch(user_id, now=NOW)

    assert inputs.history_loaded is False
    assert inputs.context.data_completeness == 10
    assert inputs.context.streaks.current_daily_streak == 0
    assert inputs.review is None


def test_calorie_trend_compares_recent_and_previous_week(
    context_repository: InMemoryContextRepository, user_id
) -> None:
    older = [_meal(day, 400) for day in range(8, 14)]
    recent = [_meal(day, 600) for day in range(0, 6)]
    context_repository.meals[user_id] = older + recent

    context = ContextService(context_repository).fetch(user_id, now=NOW).context

    assert context.performance.calories_trend == Trend.INCREASING


def test_determine_trend_has_dead_band() -> None:
    assert determine_trend(105, 100) == Trend.STABLE
    assert determine_trend(111, 100) == Trend.INCREASING
    assert determine_trend(89, 100) == Trend.DECREASING
    assert determine_trend(500, 0) == Trend.STABLE


def test_compute_streaks_counts_from_yesterday_when_today_missing() -> None:
    meals = [_meal(day, 500) for day in (1, 2, 3, 6)]

    streaks = compute_streaks(meals, NOW.date())

    assert streaks.current_daily_streak == 3
    assert streaks.longest_daily_streak == 3
    assert streaks.total_active_days == 4


def test_infer_meal_period() -> None:
    assert infer_meal_period(7) == "breakfast"
    assert infer_meal_period(12) == "lunch"
    assert infer_meal_period(19) == "dinner"
    assert infer_meal_period(23) == "snack"


def test_context_snapshot_is_json_serializable(
    context_repository: InMemoryContextRepository, user_id
) -> None:
    context_repository.questionnaires[user_id] = make_questionnaire(
        user_id, allergies=("peanuts",)
    )
    context_repository.meals[user_id] = [_meal(day, 1500) for day in range(3)]

    context = ContextService(context_repository).fetch(user_id, now=NOW).context
    snapshot = context.to_snapshot()

    encoded = json.loads(json.dumps(snapshot))
    assert encoded["profile"]["user_id"] == str(user_id)
    assert encoded["profile"]["allergies"] == ["peanuts"]
    assert encoded["performance"]["calories_trend"] == "stable"

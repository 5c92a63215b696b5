"""Tests for menu prompt templates."""

from dataclasses import replace
from uuid import uuid4

from menu_personalizer.domain.context import MainGoal, MealPatterns, StreakData, Trend
from menu_personalizer.domain.menus import GenerateMenuParams, MenuReview
from menu_personalizer.domain.targets import NutritionPlanBaseline
from menu_personalizer.services.prompts import (
    MAX_PROMPT_CHARS,
    build_basic_custom_menu_prompt,
    build_basic_menu_prompt,
    build_prompt,
)
from menu_personalizer.services.targets import compute_targets
from tests.conftest import make_context, make_questionnaire


def _inputs():  # type: ignore[no-untyped-def]
    user_id = uuid4()
    context = make_context(
        main_goal=MainGoal.GAIN_MUSCLE,
        achievement_rate=0.98,
        calories_trend=Trend.STABLE,
        streak=10,
    )
    context = replace(
        context,
        profile=replace(context.profile, allergies=("peanuts",)),
        meal_patterns=MealPatterns(most_common_proteins=("chicken", "eggs")),
        streaks=StreakData(current_daily_streak=10, longest_daily_streak=14),
    )
    questionnaire = make_questionnaire(user_id, allergies=("peanuts",))
    params = GenerateMenuParams(
        user_id=user_id,
        days=5,
        meals_per_day="3_plus_2_snacks",
        dietary_preferences=frozenset({"high_protein"}),
        excluded_ingredients=frozenset({"mushrooms"}),
        include_leftovers=True,
    )
    return params, questionnaire, context


def test_full_prompt_embeds_request_targets_and_history() -> None:
    params, questionnaire, context = _inputs()
    targets = compute_targets(context, None)

    prompt = build_prompt(params, questionnaire, None, context, targets)

    assert "5-day meal plan" in prompt
    assert "Meals per day: 5 (3_plus_2_snacks)" in prompt
    assert "Dietary preferences: high_protein" in prompt
    assert "Excluded ingredients: mushrooms" in prompt
    assert "Include leftovers: Yes" in prompt
    assert f"Daily Calories: {targets.calories}kcal" in prompt
    assert targets.adjustment_reason in prompt
    assert "Goal Achievement: 98%" in prompt
    assert "Trends: Calories stable" in prompt
    assert "Most Common Proteins: chicken, eggs" in prompt
    assert "Current Streak: 10 days (Longest: 14)" in prompt
    assert "ALLERGIES (NEVER include these): peanuts" in prompt
    assert '"days": [' in prompt
    assert "numbered 1 to 5, each with 5 meals" in prompt


def test_full_prompt_is_deterministic() -> None:
    params, questionnaire, context = _inputs()
    targets = compute_targets(context, None)

    first = build_prompt(params, questionnaire, None, context, targets)
    second = build_prompt(params, questionnaire, None, context, targets)

    assert first == second


def test_previous_review_is_included() -> None:
    params, questionnaire, context = _inputs()
    targets = compute_targets(context, None)
    review = MenuReview(rating=2, disliked="too much fish", would_recommend=False)

    prompt = build_prompt(params, questionnaire, None, context, targets, review)

    assert "=== PREVIOUS MENU FEEDBACK ===" in prompt
    assert "Rating: 2/5 stars" in prompt
    assert "What they disliked: too much fish" in prompt


def test_custom_prompt_leads_with_request() -> None:
    params, questionnaire, context = _inputs()
    params = replace(params, custom_request="High protein lunches for the office")
    targets = compute_targets(context, None)

    prompt = build_prompt(params, questionnaire, None, context, targets)

    assert prompt.startswith(
        "Create a PERSONALIZED custom meal plan based on this specific request: "
        '"High protein lunches for the office"'
    )
    assert "=== CUSTOM REQUEST ===" in prompt


def test_reduced_prompt_uses_baseline_defaults() -> None:
    params, questionnaire, _ = _inputs()

    prompt = build_prompt(params, questionnaire, None, None, None)

    assert prompt == build_basic_menu_prompt(params, questionnaire, None)
    assert "Daily Calories: 2000" in prompt
    assert "Daily Protein: 150g" in prompt
    assert "Daily Carbs: 250g" in prompt
    assert "Daily Fats: 67g" in prompt


def test_reduced_prompt_uses_saved_plan() -> None:
    params, questionnaire, _ = _inputs()
    baseline = NutritionPlanBaseline(goal_calories=2200, goal_protein_g=160)

    prompt = build_basic_menu_prompt(params, questionnaire, baseline)

    assert "Daily Calories: 2200" in prompt
    assert "Daily Protein: 160g" in prompt
    assert "Daily Fats: 67g" in prompt


def test_reduced_custom_prompt() -> None:
    params, questionnaire, _ = _inputs()
    params = replace(params, custom_request="Mediterranean week")

    prompt = build_prompt(params, questionnaire, None, None, None)

    assert prompt == build_basic_custom_menu_prompt(params, questionnaire)
    assert 'request: "Mediterranean week"' in prompt
    assert "Allergies: peanuts" in prompt


def test_long_prompt_keeps_json_contract() -> None:
    params, questionnaire, _ = _inputs()
    params = replace(params, custom_request="x" * (MAX_PROMPT_CHARS + 500))

    prompt = build_prompt(params, questionnaire, None, None, None)

    assert len(prompt) <= MAX_PROMPT_CHARS
    assert prompt.startswith('Create a custom meal plan based on this request: "xxx')
    assert prompt.endswith("numbered 1 to 5, each with 5 meals.")
    assert '"days": [' in prompt

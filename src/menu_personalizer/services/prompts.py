"""Prompt templates for menu generation."""

import logging

from menu_personalizer.domain.context import UserContext
from menu_personalizer.domain.menus import (
    GenerateMenuParams,
    MenuReview,
    Questionnaire,
    meals_per_day_count,
)
from menu_personalizer.domain.targets import AdjustedTargets, NutritionPlanBaseline

_logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 8000

BASIC_CALORIES = 2000
BASIC_PROTEIN = 150
BASIC_CARBS = 250
BASIC_FATS = 67

_MAX_LISTED_FOODS = 8

JSON_CONTRACT = """Return ONLY valid JSON with this structure (no markdown, no comments):
{{
  "title": "Menu title",
  "description": "Menu description",
  "days": [
    {{
      "day_number": 1,
      "meals": [
        {{
          "name": "Meal name",
          "meal_type": "BREAKFAST/LUNCH/DINNER/SNACK",
          "calories": number,
          "protein": number,
          "carbs": number,
          "fat": number,
          "fiber": number,
          "prep_time_minutes": number,
          "cooking_method": "method",
          "instructions": "cooking instructions",
          "ingredients": [
            {{"name": "ingredient", "quantity": number, "unit": "g/ml/piece", "category": "protein/vegetable/grain"}}
          ]
        }}
      ]
    }}
  ]
}}
Include exactly {days} entries in "days", numbered 1 to {days}, each with {meals} meals."""


def build_prompt(  # noqa: PLR0913
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
    baseline: NutritionPlanBaseline | None,
    context: UserContext | None,
    targets: AdjustedTargets | None,
    review: MenuReview | None = None,
) -> str:
    """Pick the prompt variant for the request and the data available."""
    if context is not None and targets is not None:
        if params.custom_request:
            return build_custom_menu_prompt(params, questionnaire, context, targets)
        return build_menu_prompt(params, questionnaire, context, targets, review)
    if params.custom_request:
        return build_basic_custom_menu_prompt(params, questionnaire)
    return build_basic_menu_prompt(params, questionnaire, baseline)


def build_menu_prompt(
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
    context: UserContext,
    targets: AdjustedTargets,
    review: MenuReview | None = None,
) -> str:
    """Build the full-context prompt for a personalized menu."""
    profile = context.profile
    performance = context.performance
    patterns = context.meal_patterns
    streaks = context.streaks
    insights = context.health_insights
    achievements = context.achievements
    goal = profile.main_goal.value
    protein_share = round(targets.protein * 4 / targets.calories * 100) if targets.calories else 0

    lines = [
        f"Generate a HIGHLY PERSONALIZED {params.days}-day meal plan based on "
        "comprehensive user data.",
        "",
        "=== USER PROFILE ===",
        f"Age: {profile.age} | Weight: {profile.weight_kg:g}kg -> "
        f"Target: {profile.target_weight_kg:g}kg",
        f"Height: {profile.height_cm:g}cm | BMI: {insights.bmi_category}",
        f"Main Goal: {goal}",
        f"Activity Level: {profile.activity_level}",
        f"Dietary Style: {profile.dietary_style}",
        "",
        *_restriction_lines(
            profile.allergies, profile.disliked_foods, profile.liked_foods, profile.kosher
        ),
        "",
        "=== PERSONALIZED NUTRITION TARGETS ===",
        f"Daily Calories: {targets.calories}kcal",
        f"Protein: {targets.protein}g ({protein_share}% of calories)",
        f"Carbs: {targets.carbs}g",
        f"Fats: {targets.fats}g",
        f"Water: {targets.water}ml/day",
        f"Adjustment: {targets.adjustment_reason}",
        "",
        "=== USER PERFORMANCE DATA ===",
        f"30-Day Averages: {performance.avg_daily_calories}kcal | "
        f"{performance.avg_daily_protein}g protein",
        f"Goal Achievement: {_percent(performance.overall_goal_achievement_rate)}",
        f"Consistency Score: {_percent(performance.consistency_score)}",
        f"Best Day: {performance.best_day_of_week} | "
        f"Needs Work: {performance.worst_day_of_week}",
        f"Trends: Calories {performance.calories_trend.value} | "
        f"Protein {performance.protein_trend.value}",
        "",
        "=== USER MEAL PATTERNS ===",
        f"Preferred Meal Times: Breakfast {patterns.preferred_breakfast_time} | "
        f"Lunch {patterns.preferred_lunch_time} | Dinner {patterns.preferred_dinner_time}",
        f"Most Common Proteins: {_join(patterns.most_common_proteins[:5], 'Varied')}",
        f"Most Common Carbs: {_join(patterns.most_common_carbs[:5], 'Varied')}",
        f"Avg Meals/Day: {patterns.average_meals_per_day}",
        "",
        "=== MOTIVATION & STREAK ===",
        f"Current Streak: {streaks.current_daily_streak} days "
        f"(Longest: {streaks.longest_daily_streak})",
        f"Level: {achievements.current_level} | XP: {achievements.total_xp}",
    ]
    if achievements.near_completion:
        lines.append(f"Near Achievement: {achievements.near_completion[0]}")
    adjustment = insights.recommended_adjustment
    lines += [
        "",
        "=== HEALTH INSIGHTS ===",
        f"Hydration: {insights.hydration_status}",
        f"Protein Intake: {insights.protein_intake_status}",
        f"TDEE: {insights.estimated_tdee}kcal | "
        f"Recommended Adjustment: {adjustment:+d}kcal",
        "",
        *_requirement_lines(params, questionnaire),
        "",
    ]
    if review is not None:
        lines += [*_review_lines(review), ""]

    liked = _join(profile.liked_foods[:5], "their usual foods")
    proteins = _join(patterns.most_common_proteins[:3], "varied proteins")
    lines += [
        "=== PERSONALIZATION INSTRUCTIONS ===",
        f"1. Each day's total should match ~{targets.calories}kcal "
        f"with {targets.protein}g protein",
        f"2. Use their PREFERRED foods: {liked}",
        "3. AVOID their disliked foods completely",
        f"4. {performance.best_day_of_week} is their best day - "
        "can have more complex meals",
        f"5. {performance.worst_day_of_week} is hardest - "
        "keep meals simple and satisfying",
        f"6. They're on a {streaks.current_daily_streak}-day streak - "
        "include encouraging variety",
        "7. Include foods rich in the nutrients they typically lack based on their "
        f"{insights.protein_intake_status} protein status",
        f"8. Prefer their commonly eaten proteins: {proteins}",
    ]
    if targets.simplify_meals:
        lines.append("9. Repeat a small set of simple meals to make the plan easy to follow")
    return fit_prompt("\n".join(lines), _contract(params))


def build_custom_menu_prompt(
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
    context: UserContext,
    targets: AdjustedTargets,
) -> str:
    """Build the full-context prompt centred on the user's custom request."""
    profile = context.profile
    patterns = context.meal_patterns
    lines = [
        "Create a PERSONALIZED custom meal plan based on this specific request: "
        f'"{params.custom_request}"',
        "",
        "=== USER PROFILE ===",
        f"Goal: {profile.main_goal.value} | Activity: {profile.activity_level}",
        f"Weight: {profile.weight_kg:g}kg -> Target: {profile.target_weight_kg:g}kg",
        f"Dietary Style: {profile.dietary_style}",
        "",
        *_restriction_lines(
            profile.allergies, profile.disliked_foods, profile.liked_foods, profile.kosher
        ),
        "",
        "=== PERSONALIZED TARGETS ===",
        f"Daily Calories: {targets.calories}kcal",
        f"Protein: {targets.protein}g | Carbs: {targets.carbs}g | Fats: {targets.fats}g",
        f"Water: {targets.water}ml/day",
        f"Adjustment: {targets.adjustment_reason}",
        "",
        "=== USER PATTERNS ===",
        f"Avg Meals/Day: {patterns.average_meals_per_day}",
        f"Common Proteins: {_join(patterns.most_common_proteins[:3], 'Varied')}",
        f"Current Streak: {context.streaks.current_daily_streak} days",
        f"Consistency: {_percent(context.performance.consistency_score)}",
        "",
        "=== CUSTOM REQUEST ===",
        f'"{params.custom_request}"',
        "",
        *_requirement_lines(params, questionnaire),
        "",
        "IMPORTANT: The custom request is the primary focus. Adapt all meals to "
        "fulfill this request while respecting allergies and maintaining "
        "nutritional balance.",
    ]
    return fit_prompt("\n".join(lines), _contract(params))


def build_basic_menu_prompt(
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
    baseline: NutritionPlanBaseline | None,
) -> str:
    """Build a prompt from the questionnaire and saved plan only."""
    baseline = baseline or NutritionPlanBaseline()
    lines = [
        f"Generate a {params.days}-day personalized meal plan.",
        "",
        "User Profile:",
        f"- Age: {_or(questionnaire.age, 'Unknown')}",
        f"- Weight: {_or(questionnaire.weight_kg, 'Unknown')}kg",
        f"- Height: {_or(questionnaire.height_cm, 'Unknown')}cm",
        f"- Goal: {_or(questionnaire.main_goal, 'Not specified')}",
        f"- Activity Level: {_or(questionnaire.physical_activity_level, 'Not specified')}",
        f"- Dietary Style: {_or(questionnaire.dietary_style, 'Not specified')}",
        f"- Allergies: {_join(questionnaire.allergies, 'None')}",
        f"- Dislikes: {_join(questionnaire.disliked_foods, 'None')}",
        f"- Likes: {_join(questionnaire.liked_foods, 'None')}",
        "",
        "Nutrition Targets:",
        f"- Daily Calories: {_num(baseline.goal_calories or params.target_calories or BASIC_CALORIES)}",
        f"- Daily Protein: {_num(baseline.goal_protein_g or BASIC_PROTEIN)}g",
        f"- Daily Carbs: {_num(baseline.goal_carbs_g or BASIC_CARBS)}g",
        f"- Daily Fats: {_num(baseline.goal_fats_g or BASIC_FATS)}g",
        "",
        *_requirement_lines(params, questionnaire),
    ]
    return fit_prompt("\n".join(lines), _contract(params))


def build_basic_custom_menu_prompt(
    params: GenerateMenuParams, questionnaire: Questionnaire
) -> str:
    """Build a custom-request prompt from the questionnaire only."""
    lines = [
        f'Create a custom meal plan based on this request: "{params.custom_request}"',
        "",
        "User Context:",
        f"- Dietary Style: {_or(questionnaire.dietary_style, 'Not specified')}",
        f"- Allergies: {_join(questionnaire.allergies, 'None')}",
        f"- Cooking Preference: {_or(questionnaire.cooking_preference, 'Not specified')}",
        "",
        *_requirement_lines(params, questionnaire),
    ]
    return fit_prompt("\n".join(lines), _contract(params))


def _restriction_lines(
    allergies: tuple[str, ...],
    disliked: tuple[str, ...],
    liked: tuple[str, ...],
    kosher: bool,
) -> list[str]:
    return [
        "=== CRITICAL RESTRICTIONS ===",
        f"ALLERGIES (NEVER include these): {_join(allergies, 'None')}",
        f"DISLIKES (Avoid): {_join(disliked[:_MAX_LISTED_FOODS], 'None specified')}",
        f"LIKES (Prefer): {_join(liked[:_MAX_LISTED_FOODS], 'None specified')}",
        f"Kosher: {'YES - meals must be kosher' if kosher else 'No restriction'}",
    ]


def _requirement_lines(
    params: GenerateMenuParams, questionnaire: Questionnaire
) -> list[str]:
    budget = f"{params.budget:g}/day" if params.budget else "Moderate"
    lines = [
        "=== MENU REQUIREMENTS ===",
        f"- Duration: {params.days} days",
        f"- Meals per day: {meals_per_day_count(params.meals_per_day)} "
        f"({params.meals_per_day})",
        f"- Budget: {budget}",
        f"- Max daily prep time: {questionnaire.daily_cooking_time or '30 minutes'}",
        f"- Cooking methods: {_join(questionnaire.available_cooking_methods, 'All methods')}",
        f"- Dietary preferences: {_join(sorted(params.dietary_preferences), 'None')}",
        f"- Excluded ingredients: {_join(sorted(params.excluded_ingredients), 'None')}",
        f"- Meal change frequency: {params.meal_change_frequency}",
        f"- Include leftovers: {'Yes' if params.include_leftovers else 'No'}",
        f"- Same meal times every day: {'Yes' if params.same_meal_times else 'No'}",
    ]
    if params.target_calories:
        lines.append(f"- Requested daily calories: {params.target_calories}")
    if params.custom_request:
        lines.append(f"- Special request: {params.custom_request}")
    return lines


def _review_lines(review: MenuReview) -> list[str]:
    return [
        "=== PREVIOUS MENU FEEDBACK ===",
        f"Rating: {review.rating}/5 stars",
        f"What they liked: {review.liked or 'Not specified'}",
        f"What they disliked: {review.disliked or 'Not specified'}",
        f"Suggestions for improvement: {review.suggestions or 'None'}",
        f"Would recommend: {'Yes' if review.would_recommend else 'No'}",
        "-> IMPORTANT: Use this feedback to improve this new menu. Include more of "
        "what they liked, avoid what they disliked, and act on their suggestions.",
    ]


def fit_prompt(body: str, contract: str) -> str:
    """Join the narrative and the JSON contract within MAX_PROMPT_CHARS.

    Only the narrative is shortened; the contract is always kept whole.
    """
    budget = MAX_PROMPT_CHARS - len(contract) - 2
    if len(body) > budget:
        _logger.info(
            "Truncating prompt narrative from %s to %s characters", len(body), budget
        )
        body = body[:budget].rstrip()
    return f"{body}\n\n{contract}"


def _contract(params: GenerateMenuParams) -> str:
    return JSON_CONTRACT.format(
        days=params.days, meals=meals_per_day_count(params.meals_per_day)
    )


def _join(values: tuple[str, ...] | list[str], default: str) -> str:
    return ", ".join(values) or default


def _percent(rate: float) -> str:
    return f"{round(rate * 100)}%"


def _or(value: object, default: str) -> str:
    return default if value is None or value == "" else str(value)


def _num(value: float) -> str:
    return f"{value:g}"

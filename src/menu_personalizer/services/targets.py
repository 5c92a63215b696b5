"""Adaptive daily target computation."""

import math

from menu_personalizer.domain.context import MainGoal, Trend, UserContext
from menu_personalizer.domain.targets import AdjustedTargets, NutritionPlanBaseline

DEFAULT_REASON = "Standard targets based on your profile."

LOW_ACHIEVEMENT_RATE = 0.7
HIGH_ACHIEVEMENT_RATE = 0.95
LOW_CONSISTENCY = 0.5
STREAK_MILESTONE = 7


def compute_targets(
    context: UserContext, baseline: NutritionPlanBaseline | None
) -> AdjustedTargets:
    """Apply the adjustment rules to the user's baseline goals.

    Rules run in a fixed order and compose multiplicatively, so several
    simultaneous conditions blend instead of overriding each other. Each
    firing rule contributes one sentence to the adjustment reason.
    """
    performance = context.performance
    goal = context.profile.main_goal
    reasons: list[str] = []
    calorie_multiplier = 1.0
    protein_multiplier = 1.0
    simplify_meals = False

    if performance.overall_goal_achievement_rate < LOW_ACHIEVEMENT_RATE:
        calorie_multiplier *= 0.95
        reasons.append("Adjusted for easier target achievement.")
    elif performance.overall_goal_achievement_rate > HIGH_ACHIEVEMENT_RATE:
        calorie_multiplier *= 1.03
        protein_multiplier *= 1.05
        reasons.append("Increased targets based on excellent performance.")

    if performance.consistency_score < LOW_CONSISTENCY:
        simplify_meals = True
        reasons.append("Simplified for better consistency.")

    if performance.calories_trend == Trend.INCREASING and goal == MainGoal.LOSE_WEIGHT:
        calorie_multiplier *= 0.97
        reasons.append("Slight reduction to support weight loss goal.")
    elif (
        performance.calories_trend == Trend.DECREASING
        and goal == MainGoal.GAIN_MUSCLE
    ):
        calorie_multiplier *= 1.05
        protein_multiplier *= 1.1
        reasons.append("Increased to support muscle gain goal.")

    if goal == MainGoal.GAIN_MUSCLE:
        protein_multiplier *= 1.1
    elif goal == MainGoal.LOSE_WEIGHT:
        # Muscle preservation during a deficit.
        protein_multiplier *= 1.05

    streak = context.streaks.current_daily_streak
    if streak >= STREAK_MILESTONE:
        reasons.append(f"Great {streak}-day streak!")

    base_calories, base_protein, base_carbs, base_fats = _resolve_baseline(
        context, baseline
    )
    return AdjustedTargets(
        calories=round_half_up(base_calories * calorie_multiplier),
        protein=round_half_up(base_protein * protein_multiplier),
        carbs=round_half_up(base_carbs * calorie_multiplier),
        fats=round_half_up(base_fats * calorie_multiplier),
        water=int(context.goals.daily_water),
        adjustment_reason=" ".join(reasons) or DEFAULT_REASON,
        calorie_multiplier=calorie_multiplier,
        protein_multiplier=protein_multiplier,
        simplify_meals=simplify_meals,
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def _resolve_baseline(
    context: UserContext, baseline: NutritionPlanBaseline | None
) -> tuple[float, float, float, float]:
    goals = context.goals
    if baseline is None:
        return (
            goals.daily_calories,
            goals.daily_protein,
            goals.daily_carbs,
            goals.daily_fats,
        )
    return (
        baseline.goal_calories or goals.daily_calories,
        baseline.goal_protein_g or goals.daily_protein,
        baseline.goal_carbs_g or goals.daily_carbs,
        baseline.goal_fats_g or goals.daily_fats,
    )

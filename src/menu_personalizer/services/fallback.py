"""Deterministic menu generation from the static meal catalog."""

import logging
from collections.abc import Sequence

from menu_personalizer.domain.context import UserContext, normalize_goal
from menu_personalizer.domain.errors import FallbackExhaustionError
from menu_personalizer.domain.menus import (
    GenerateMenuParams,
    MenuDraft,
    PlannedDay,
    PlannedIngredient,
    PlannedMeal,
    Questionnaire,
    meal_slots,
)
from menu_personalizer.domain.targets import AdjustedTargets
from menu_personalizer.services.catalog import (
    DEFAULT_CATALOG,
    DINNER,
    LUNCH,
    MealTemplate,
)
from menu_personalizer.services.targets import round_half_up

_logger = logging.getLogger(__name__)

DEFAULT_DAILY_CALORIES = 2000
FALLBACK_TOLERANCE = 0.05
QUICK_PREP_MINUTES = 15

KNOWN_TAGS = frozenset(
    {"vegetarian", "vegan", "gluten_free", "dairy_free", "kosher", "high_protein", "low_carb"}
)
_TAG_ALIASES = {
    "keto": "low_carb",
    "plant_based": "vegan",
    "lactose_free": "dairy_free",
    "celiac": "gluten_free",
}
# Styles that impose no restriction on the catalog.
_UNRESTRICTED_STYLES = frozenset({"", "regular", "balanced", "omnivore", "none", "other"})

_ROTATION_PERIODS = {"daily": 1, "every_3_days": 3, "automatic": 1}


def generate_fallback(  # noqa: PLR0913
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
    context: UserContext | None = None,
    targets: AdjustedTargets | None = None,
    catalog: Sequence[MealTemplate] = DEFAULT_CATALOG,
) -> MenuDraft:
    """Build a menu with the same shape as a generated one, without external calls.

    Raises:
        FallbackExhaustionError: every catalog template is excluded by the
            user's restrictions.
    """
    daily_calories = resolve_daily_calories(params, context, targets)
    eligible = eligible_templates(catalog, params, questionnaire)
    if not eligible:
        raise FallbackExhaustionError(
            "No meal templates left after applying exclusions and preferences"
        )
    eligible = apply_request_theme(eligible, params.custom_request)
    simplify = targets.simplify_meals if targets is not None else False
    period = rotation_period(params.meal_change_frequency, simplify)
    slots = meal_slots(params.meals_per_day)

    days: list[PlannedDay] = []
    previous_dinner: MealTemplate | None = None
    for day_number in range(1, params.days + 1):
        rotation = 0 if period is None else (day_number - 1) // period
        meals: list[PlannedMeal] = []
        seen: dict[str, int] = {}
        dinner: MealTemplate | None = None
        for meal_type, share in slots:
            occurrence = seen.get(meal_type, 0)
            seen[meal_type] = occurrence + 1
            allocation = daily_calories * share
            if (
                params.include_leftovers
                and meal_type == LUNCH
                and previous_dinner is not None
            ):
                meals.append(_leftover_meal(previous_dinner, allocation))
                continue
            template = _pick_template(eligible, meal_type, rotation + occurrence)
            if meal_type == DINNER:
                dinner = template
            meals.append(scale_template(template, meal_type, allocation))
        previous_dinner = dinner
        days.append(PlannedDay(day_number=day_number, meals=meals))

    _logger.info(
        "Built fallback menu for user %s: %s days, %s kcal/day",
        params.user_id,
        params.days,
        daily_calories,
    )
    return MenuDraft(
        title=_title(params, questionnaire),
        description=_description(daily_calories, targets),
        days=days,
    )


def resolve_daily_calories(
    params: GenerateMenuParams,
    context: UserContext | None,
    targets: AdjustedTargets | None,
) -> int:
    """Pick the first positive calorie target available."""
    candidates = (
        targets.calories if targets is not None else None,
        params.target_calories,
        context.goals.daily_calories if context is not None else None,
    )
    for candidate in candidates:
        if candidate and candidate > 0:
            return round_half_up(candidate)
    return DEFAULT_DAILY_CALORIES


def normalize_tag(raw: str) -> str:
    tag = raw.strip().lower().replace("-", "_").replace(" ", "_")
    return _TAG_ALIASES.get(tag, tag)


def required_tags(
    params: GenerateMenuParams, questionnaire: Questionnaire
) -> frozenset[str]:
    """Collect the catalog tags every selected template must carry."""
    tags: set[str] = set()
    for preference in params.dietary_preferences:
        tag = normalize_tag(preference)
        if tag in KNOWN_TAGS:
            tags.add(tag)
        elif tag:
            _logger.info("Ignoring unknown dietary preference %r", preference)
    style = normalize_tag(questionnaire.dietary_style or "")
    if style in KNOWN_TAGS:
        tags.add(style)
    elif style not in _UNRESTRICTED_STYLES:
        _logger.info("Ignoring unknown dietary style %r", questionnaire.dietary_style)
    if questionnaire.kosher:
        tags.add("kosher")
    if "vegan" in tags:
        tags.add("vegetarian")
    return frozenset(tags)


def excluded_terms(
    params: GenerateMenuParams, questionnaire: Questionnaire
) -> tuple[str, ...]:
    terms = [
        *params.excluded_ingredients,
        *questionnaire.allergies,
        *questionnaire.disliked_foods,
    ]
    return tuple(term.strip().lower() for term in terms if term.strip())


def eligible_templates(
    catalog: Sequence[MealTemplate],
    params: GenerateMenuParams,
    questionnaire: Questionnaire,
) -> list[MealTemplate]:
    """Filter the catalog by restrictions, keeping catalog order."""
    tags = required_tags(params, questionnaire)
    terms = excluded_terms(params, questionnaire)
    return [
        template
        for template in catalog
        if tags <= template.tags
        and not any(
            ingredient.matches(term)
            for ingredient in template.ingredients
            for term in terms
        )
    ]


def apply_request_theme(
    templates: list[MealTemplate], custom_request: str | None
) -> list[MealTemplate]:
    """Reorder or narrow templates towards the theme of a custom request."""
    if not custom_request:
        return templates
    request = custom_request.lower()
    themed = list(templates)
    if "vegetarian" in request or "plant" in request:
        vegetarian = [t for t in themed if "vegetarian" in t.tags]
        if vegetarian:
            themed = vegetarian
    if "quick" in request or "fast" in request:
        themed.sort(key=lambda t: t.prep_time_minutes > QUICK_PREP_MINUTES)
    if "protein" in request or "muscle" in request:
        themed.sort(key=lambda t: t.protein_density, reverse=True)
    return themed


def rotation_period(frequency: str, simplify_meals: bool) -> int | None:
    """Days between meal changes; None means the same meals every day."""
    if frequency == "weekly":
        return None
    if frequency == "automatic" and simplify_meals:
        return 3
    period = _ROTATION_PERIODS.get(frequency, 1)
    if simplify_meals and period == 1:
        return 2
    return period


def scale_template(template: MealTemplate, meal_type: str, allocation: float) -> PlannedMeal:
    """Scale a template's ingredients so the meal matches its calorie allocation."""
    factor = allocation / template.calories
    ingredients: list[PlannedIngredient] = []
    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0, "fiber": 0.0}
    for item in template.ingredients:
        grams = max(1, round_half_up(item.grams * factor))
        ingredients.append(
            PlannedIngredient(
                name=item.name, quantity=grams, unit="g", category=item.category
            )
        )
        totals["calories"] += item.calories * grams / 100
        totals["protein"] += item.protein * grams / 100
        totals["carbs"] += item.carbs * grams / 100
        totals["fat"] += item.fat * grams / 100
        totals["fiber"] += item.fiber * grams / 100
    return PlannedMeal(
        name=template.name,
        meal_type=meal_type,
        calories=round(totals["calories"], 1),
        protein=round(totals["protein"], 1),
        carbs=round(totals["carbs"], 1),
        fat=round(totals["fat"], 1),
        fiber=round(totals["fiber"], 1),
        prep_time_minutes=template.prep_time_minutes,
        cooking_method=template.cooking_method,
        instructions=template.instructions,
        ingredients=ingredients,
    )


def _pick_template(
    eligible: list[MealTemplate], meal_type: str, index: int
) -> MealTemplate:
    options = [t for t in eligible if meal_type in t.meal_types] or eligible
    return options[index % len(options)]


def _leftover_meal(template: MealTemplate, allocation: float) -> PlannedMeal:
    meal = scale_template(template, LUNCH, allocation)
    return meal.model_copy(
        update={
            "name": f"Leftover {template.name}",
            "prep_time_minutes": 5,
            "instructions": f"Reheat the leftover {template.name.lower()} from last night.",
        }
    )


def _title(params: GenerateMenuParams, questionnaire: Questionnaire) -> str:
    if params.custom_request:
        return f"Custom {params.days}-Day Menu"
    goal = normalize_goal(questionnaire.main_goal).value.replace("_", " ")
    return f"Personalized {params.days}-Day Menu for {goal}"


def _description(daily_calories: int, targets: AdjustedTargets | None) -> str:
    description = f"Template-based menu targeting {daily_calories} kcal per day."
    if targets is not None:
        description = f"{description} {targets.adjustment_reason}"
    return description

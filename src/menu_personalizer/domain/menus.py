"""Domain models for generated menus."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

PLAN_SCHEMA_VERSION = 1

MEALS_PER_DAY_OPTIONS = ("2_main", "3_main", "2_plus_1_intermediate", "3_plus_2_snacks")
MEAL_CHANGE_FREQUENCIES = ("daily", "every_3_days", "weekly", "automatic")

# Share of the daily calories allocated to each meal slot, in serving order.
MEAL_SLOT_SPLITS: dict[str, tuple[tuple[str, float], ...]] = {
    "2_main": (("BREAKFAST", 0.40), ("DINNER", 0.60)),
    "3_main": (("BREAKFAST", 0.25), ("LUNCH", 0.40), ("DINNER", 0.35)),
    "2_plus_1_intermediate": (("BREAKFAST", 0.35), ("SNACK", 0.15), ("DINNER", 0.50)),
    "3_plus_2_snacks": (
        ("BREAKFAST", 0.25),
        ("SNACK", 0.05),
        ("LUNCH", 0.35),
        ("SNACK", 0.05),
        ("DINNER", 0.30),
    ),
}


def meal_slots(option: str) -> tuple[tuple[str, float], ...]:
    """Return the meal slots for a meals-per-day option, defaulting to 3_main."""
    return MEAL_SLOT_SPLITS.get(option, MEAL_SLOT_SPLITS["3_main"])


def meals_per_day_count(option: str) -> int:
    """Number of meals served per day for an option."""
    return len(meal_slots(option))


class GenerationSource(StrEnum):
    """Provenance of a generated menu."""

    AI = "ai"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class GenerateMenuParams:
    """Request envelope for menu generation."""

    user_id: UUID
    days: int = 7
    meals_per_day: str = "3_main"
    custom_request: str | None = None
    budget: float | None = None
    meal_change_frequency: str = "daily"
    include_leftovers: bool = False
    same_meal_times: bool = True
    target_calories: int | None = None
    dietary_preferences: frozenset[str] = frozenset()
    excluded_ingredients: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Questionnaire:
    """Latest completed questionnaire for a user."""

    user_id: UUID
    age: int | None = None
    gender: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    target_weight_kg: float | None = None
    main_goal: str | None = None
    physical_activity_level: str | None = None
    dietary_style: str | None = None
    allergies: tuple[str, ...] = ()
    medical_conditions: tuple[str, ...] = ()
    liked_foods: tuple[str, ...] = ()
    disliked_foods: tuple[str, ...] = ()
    kosher: bool = False
    available_cooking_methods: tuple[str, ...] = ()
    daily_cooking_time: str | None = None
    cooking_preference: str | None = None
    meals_per_day: int | None = None
    daily_food_budget: float | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class MenuReview:
    """The user's feedback on a previous menu."""

    rating: int
    liked: str | None = None
    disliked: str | None = None
    suggestions: str | None = None
    would_recommend: bool = False


class PlannedIngredient(BaseModel):
    """Ingredient line of a planned meal."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1)
    quantity: float = Field(ge=0, strict=True)
    unit: str = "g"
    category: str = "other"


class PlannedMeal(BaseModel):
    """Single meal in a planned day."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1)
    meal_type: str = Field(min_length=1)
    calories: float = Field(ge=0, strict=True)
    protein: float = Field(ge=0, strict=True)
    carbs: float = Field(ge=0, strict=True)
    fat: float = Field(ge=0, strict=True)
    fiber: float = Field(default=0, ge=0, strict=True)
    prep_time_minutes: int = Field(default=30, ge=0)
    cooking_method: str | None = None
    instructions: str | None = None
    ingredients: list[PlannedIngredient] = Field(min_length=1)


class PlannedDay(BaseModel):
    """All meals planned for one day."""

    day_number: int = Field(ge=1, strict=True)
    meals: list[PlannedMeal] = Field(min_length=1)

    @property
    def calories(self) -> float:
        """Total calories of the day."""
        return sum(meal.calories for meal in self.meals)


class MenuDraft(BaseModel):
    """Menu shape shared by generated and fallback plans."""

    title: str = Field(min_length=1)
    description: str = ""
    days: list[PlannedDay] = Field(min_length=1)

    def totals(self) -> dict[str, float]:
        """Return the summed macros over all days."""
        meals = [meal for day in self.days for meal in day.meals]
        return {
            "calories": round(sum(meal.calories for meal in meals), 1),
            "protein": round(sum(meal.protein for meal in meals), 1),
            "carbs": round(sum(meal.carbs for meal in meals), 1),
            "fat": round(sum(meal.fat for meal in meals), 1),
        }


@dataclass(frozen=True)
class MenuRecord:
    """Fully formed menu ready to be persisted."""

    user_id: UUID
    title: str
    description: str
    total_days: int
    start_date: date
    end_date: date
    days: list[PlannedDay]
    generation_source: GenerationSource
    dietary_category: str
    totals: dict[str, float]
    adjusted_targets: dict[str, object]
    context_snapshot: dict[str, object]
    schema_version: int = PLAN_SCHEMA_VERSION


@dataclass(frozen=True)
class MealPlan:
    """Persisted menu with the context that produced it."""

    menu_id: UUID
    user_id: UUID
    title: str
    description: str
    total_days: int
    start_date: date
    end_date: date
    days: list[PlannedDay]
    generation_source: GenerationSource
    dietary_category: str
    totals: dict[str, float]
    adjusted_targets: dict[str, object]
    context_snapshot: dict[str, object]
    schema_version: int = PLAN_SCHEMA_VERSION
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise the plan for API responses."""
        return {
            "menu_id": str(self.menu_id),
            "title": self.title,
            "description": self.description,
            "total_days": self.total_days,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "generation_source": self.generation_source.value,
            "dietary_category": self.dietary_category,
            "totals": self.totals,
            "days": [day.model_dump() for day in self.days],
            "adjusted_targets": self.adjusted_targets,
            "schema_version": self.schema_version,
        }


@dataclass(frozen=True)
class ShoppingListItem:
    """Aggregated ingredient for a menu's shopping list."""

    name: str
    quantity: float
    unit: str
    category: str


@dataclass
class ShoppingList:
    """Ingredients needed for a whole menu, grouped by category."""

    menu_id: UUID
    items: list[ShoppingListItem] = field(default_factory=list)

    def grouped_by_category(self) -> dict[str, list[ShoppingListItem]]:
        """Return items grouped by lower-cased category."""
        groups: dict[str, list[ShoppingListItem]] = {}
        for item in self.items:
            groups.setdefault(item.category.lower(), []).append(item)
        return groups

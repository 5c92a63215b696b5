"""Supabase repository for the user data behind a context snapshot."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from menu_personalizer.domain.context import AchievementProgress, MealEntry, WaterEntry
from menu_personalizer.domain.menus import MenuReview, Questionnaire
from menu_personalizer.domain.targets import NutritionPlanBaseline
from menu_personalizer.services.context import ContextRepository


@dataclass
class SupabaseContextRepository(ContextRepository):
    """Supabase implementation for context reads."""

    client: Client

    def get_latest_questionnaire(self, user_id: UUID) -> Questionnaire | None:
        """Return the most recently completed questionnaire."""
        response = (
            self.client.table("user_questionnaires")
            .select("*")
            .eq("user_id", str(user_id))
            .order("date_completed", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_questionnaire(user_id, response.data[0])

    def get_latest_nutrition_plan(
        self, user_id: UUID
    ) -> NutritionPlanBaseline | None:
        """Return goals from the most recent nutrition plan."""
        response = (
            self.client.table("nutrition_plans")
            .select("goal_calories, goal_protein_g, goal_carbs_g, goal_fats_g")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return NutritionPlanBaseline(
            goal_calories=_optional_float(row.get("goal_calories")),
            goal_protein_g=_optional_float(row.get("goal_protein_g")),
            goal_carbs_g=_optional_float(row.get("goal_carbs_g")),
            goal_fats_g=_optional_float(row.get("goal_fats_g")),
        )

    def list_meal_entries(self, user_id: UUID, since: datetime) -> list[MealEntry]:
        """Return meals logged since the given time, newest first."""
        response = (
            self.client.table("meals")
            .select("created_at, meal_name, calories, protein_g, carbs_g, fats_g, meal_period")
            .eq("user_id", str(user_id))
            .gte("created_at", since.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_water_entries(self, user_id: UUID, since: datetime) -> list[WaterEntry]:
        """Return daily water intake rows since the given time."""
        response = (
            self.client.table("water_intakes")
            .select("date, cups_consumed")
            .eq("user_id", str(user_id))
            .gte("date", since.date().isoformat())
            .execute()
        )
        return [
            WaterEntry(
                day=date.fromisoformat(str(row["date"])[:10]),
                cups=int(row.get("cups_consumed") or 0),
            )
            for row in response.data or []
        ]

    def list_achievements(self, user_id: UUID) -> list[AchievementProgress]:
        """Return achievement progress joined with achievement definitions."""
        response = (
            self.client.table("user_achievements")
            .select(
                "unlocked, progress, unlocked_date, "
                "achievements(title, max_progress, points)"
            )
            .eq("user_id", str(user_id))
            .execute()
        )
        return [_parse_achievement(row) for row in response.data or []]

    def get_latest_menu_review(self, user_id: UUID) -> MenuReview | None:
        """Return the user's most recent menu review."""
        response = (
            self.client.table("menu_reviews")
            .select("rating, liked, disliked, suggestions, would_recommend")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return MenuReview(
            rating=int(row.get("rating") or 0),
            liked=row.get("liked"),
            disliked=row.get("disliked"),
            suggestions=row.get("suggestions"),
            would_recommend=bool(row.get("would_recommend")),
        )


def _parse_questionnaire(user_id: UUID, row: dict[str, object]) -> Questionnaire:
    return Questionnaire(
        user_id=user_id,
        age=int(row["age"]) if row.get("age") is not None else None,
        gender=row.get("gender"),
        height_cm=_optional_float(row.get("height_cm")),
        weight_kg=_optional_float(row.get("weight_kg")),
        target_weight_kg=_optional_float(row.get("target_weight_kg")),
        main_goal=row.get("main_goal"),
        physical_activity_level=row.get("physical_activity_level"),
        dietary_style=row.get("dietary_style"),
        allergies=_string_tuple(row.get("allergies")),
        medical_conditions=_string_tuple(row.get("medical_conditions")),
        liked_foods=_string_tuple(row.get("liked_foods")),
        disliked_foods=_string_tuple(row.get("disliked_foods")),
        kosher=bool(row.get("kosher")),
        available_cooking_methods=_string_tuple(row.get("available_cooking_methods")),
        daily_cooking_time=row.get("daily_cooking_time"),
        cooking_preference=row.get("cooking_preference"),
        meals_per_day=int(row["meals_per_day"]) if row.get("meals_per_day") else None,
        daily_food_budget=_optional_float(row.get("daily_food_budget")),
        completed_at=_optional_datetime(row.get("date_completed")),
    )


def _parse_meal(row: dict[str, object]) -> MealEntry:
    return MealEntry(
        logged_at=_utc_datetime(str(row["created_at"])),
        name=str(row.get("meal_name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fats_g=float(row.get("fats_g") or 0.0),
        meal_period=row.get("meal_period"),
    )


def _parse_achievement(row: dict[str, object]) -> AchievementProgress:
    definition = row.get("achievements") or {}
    if not isinstance(definition, dict):
        definition = {}
    return AchievementProgress(
        title=str(definition.get("title") or "Achievement"),
        unlocked=bool(row.get("unlocked")),
        progress=int(row.get("progress") or 0),
        max_progress=int(definition.get("max_progress") or 1),
        points=int(definition.get("points") or 0),
        unlocked_at=_optional_datetime(row.get("unlocked_date")),
    )


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, list):
        return tuple(str(item) for item in value if item)
    if isinstance(value, str) and value.strip():
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return ()


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _optional_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return _utc_datetime(value)
    return None


def _utc_datetime(value: str) -> datetime:
    """Parse a timestamp; naive values are treated as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)

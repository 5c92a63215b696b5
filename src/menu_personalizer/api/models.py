"""Pydantic models for menu API payloads."""

from pydantic import BaseModel, Field, field_validator

from menu_personalizer.domain.menus import MEAL_CHANGE_FREQUENCIES, MEALS_PER_DAY_OPTIONS


class GenerateMenuRequest(BaseModel):
    """Body of a menu generation request."""

    days: int = Field(default=7, ge=1, le=30)
    meals_per_day: str = "3_main"
    budget: float | None = Field(default=None, gt=0)
    meal_change_frequency: str = "daily"
    include_leftovers: bool = False
    same_meal_times: bool = True
    target_calories: int | None = Field(default=None, gt=0)
    dietary_preferences: list[str] = Field(default_factory=list)
    excluded_ingredients: list[str] = Field(default_factory=list)

    @field_validator("meals_per_day")
    @classmethod
    def _known_meals_option(cls, value: str) -> str:
        if value not in MEALS_PER_DAY_OPTIONS:
            raise ValueError(f"meals_per_day must be one of {MEALS_PER_DAY_OPTIONS}")
        return value

    @field_validator("meal_change_frequency")
    @classmethod
    def _known_frequency(cls, value: str) -> str:
        if value not in MEAL_CHANGE_FREQUENCIES:
            raise ValueError(
                f"meal_change_frequency must be one of {MEAL_CHANGE_FREQUENCIES}"
            )
        return value


class CustomMenuRequest(GenerateMenuRequest):
    """Body of a custom menu request."""

    custom_request: str = Field(min_length=1, max_length=1000)

"""Domain models for nutrition targets."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class NutritionPlanBaseline:
    """Most recently saved nutrition plan goals."""

    goal_calories: float | None = None
    goal_protein_g: float | None = None
    goal_carbs_g: float | None = None
    goal_fats_g: float | None = None


@dataclass(frozen=True)
class AdjustedTargets:
    """Daily targets after the adjustment rules have been applied."""

    calories: int
    protein: int
    carbs: int
    fats: int
    water: int
    adjustment_reason: str
    calorie_multiplier: float = 1.0
    protein_multiplier: float = 1.0
    simplify_meals: bool = False

    def to_snapshot(self) -> dict[str, object]:
        """Return a JSON-ready copy of the targets."""
        return asdict(self)

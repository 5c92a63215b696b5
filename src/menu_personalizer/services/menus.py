"""Menu generation orchestration and menu read operations."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from menu_personalizer.domain.context import MainGoal
from menu_personalizer.domain.errors import (
    GenerationFailedError,
    GenerationUnavailableError,
    MalformedGenerationError,
    MenuGenerationError,
    PersistenceError,
)
from menu_personalizer.domain.menus import (
    GenerateMenuParams,
    GenerationSource,
    MealPlan,
    MenuDraft,
    MenuRecord,
    ShoppingList,
    ShoppingListItem,
)
from menu_personalizer.domain.targets import AdjustedTargets
from menu_personalizer.services.catalog import DEFAULT_CATALOG, MealTemplate
from menu_personalizer.services.context import ContextService, GenerationInputs
from menu_personalizer.services.fallback import generate_fallback
from menu_personalizer.services.generation import GenerationClient
from menu_personalizer.services.parser import parse_menu
from menu_personalizer.services.prompts import build_prompt
from menu_personalizer.services.targets import compute_targets

_logger = logging.getLogger(__name__)

_RECOVERABLE_ERRORS = (
    GenerationUnavailableError,
    GenerationFailedError,
    MalformedGenerationError,
)


class MenuRepository(Protocol):
    """Persistence interface for generated menus."""

    def create_menu(self, record: MenuRecord) -> MealPlan:
        """Insert a menu row and return the stored plan."""

    def get_menu(self, user_id: UUID, menu_id: UUID) -> MealPlan | None:
        """Return one of the user's menus by id."""

    def list_menus(self, user_id: UUID) -> list[MealPlan]:
        """Return the user's menus, newest first."""

    def count_menus(self, user_id: UUID) -> int:
        """Return how many menus the user has stored."""

    def delete_menu(self, user_id: UUID, menu_id: UUID) -> bool:
        """Delete one of the user's menus; return whether a row was removed."""


@dataclass
class MenuService:
    """Runs the context, targets, generation and persistence pipeline."""

    context_service: ContextService
    generation_client: GenerationClient
    repository: MenuRepository
    max_tokens: int = 2000
    catalog: Sequence[MealTemplate] = DEFAULT_CATALOG

    async def generate_personalized_menu(self, params: GenerateMenuParams) -> MealPlan:
        """Generate and persist a menu tailored to the user's history.

        Generation and parsing failures fall back to the template catalog;
        only PreconditionError, PersistenceError and FallbackExhaustionError
        are raised.
        """
        return await self._generate(params)

    async def generate_custom_menu(self, params: GenerateMenuParams) -> MealPlan:
        """Generate and persist a menu built around a free-text request."""
        if not params.custom_request or not params.custom_request.strip():
            raise ValueError("custom_request is required for a custom menu")
        return await self._generate(params)

    def get_menu(self, user_id: UUID, menu_id: UUID) -> MealPlan | None:
        """Return a stored menu."""
        try:
            return self.repository.get_menu(user_id, menu_id)
        except Exception as exc:
            raise PersistenceError(f"Failed to load menu {menu_id}") from exc

    def list_menus(self, user_id: UUID) -> list[MealPlan]:
        """Return all stored menus for a user."""
        try:
            return self.repository.list_menus(user_id)
        except Exception as exc:
            raise PersistenceError("Failed to list menus") from exc

    def count_menus(self, user_id: UUID) -> int:
        """Return the number of stored menus for a user."""
        try:
            return self.repository.count_menus(user_id)
        except Exception as exc:
            raise PersistenceError("Failed to count menus") from exc

    def delete_menu(self, user_id: UUID, menu_id: UUID) -> bool:
        """Delete a stored menu owned by the user."""
        try:
            deleted = self.repository.delete_menu(user_id, menu_id)
        except Exception as exc:
            raise PersistenceError(f"Failed to delete menu {menu_id}") from exc
        if deleted:
            _logger.info("Deleted menu: user_id=%s menu_id=%s", user_id, menu_id)
        return deleted

    def build_shopping_list(self, user_id: UUID, menu_id: UUID) -> ShoppingList | None:
        """Aggregate the ingredients of a stored menu."""
        plan = self.get_menu(user_id, menu_id)
        if plan is None:
            return None
        return aggregate_shopping_list(plan)

    async def _generate(self, params: GenerateMenuParams) -> MealPlan:
        inputs = self._fetch_inputs(params.user_id)
        targets = compute_targets(inputs.context, inputs.baseline)
        _logger.info(
            "Computed targets: user_id=%s calories=%s reason=%s",
            params.user_id,
            targets.calories,
            targets.adjustment_reason,
        )

        try:
            draft = await self._try_generation(params, inputs, targets)
            source = GenerationSource.AI
        except _RECOVERABLE_ERRORS as exc:
            _logger.warning(
                "Generation failed, using fallback: user_id=%s reason=%s error=%s",
                params.user_id,
                type(exc).__name__,
                exc,
            )
            draft = generate_fallback(
                params, inputs.questionnaire, inputs.context, targets, self.catalog
            )
            source = GenerationSource.FALLBACK

        record = build_menu_record(params, inputs, targets, draft, source)
        try:
            plan = self.repository.create_menu(record)
        except Exception as exc:
            raise PersistenceError("Failed to save menu") from exc
        _logger.info(
            "Saved menu: user_id=%s menu_id=%s source=%s",
            params.user_id,
            plan.menu_id,
            source.value,
        )
        return plan

    def _fetch_inputs(self, user_id: UUID) -> GenerationInputs:
        try:
            return self.context_service.fetch(user_id)
        except MenuGenerationError:
            raise
        except Exception as exc:
            raise PersistenceError("Failed to load user data") from exc

    async def _try_generation(
        self,
        params: GenerateMenuParams,
        inputs: GenerationInputs,
        targets: AdjustedTargets,
    ) -> MenuDraft:
        context = inputs.context if inputs.history_loaded else None
        prompt = build_prompt(
            params,
            inputs.questionnaire,
            inputs.baseline,
            context,
            targets if context is not None else None,
            inputs.review,
        )
        raw_text = await self.generation_client.generate(prompt, self.max_tokens)
        return parse_menu(raw_text, params.days)


def build_menu_record(
    params: GenerateMenuParams,
    inputs: GenerationInputs,
    targets: AdjustedTargets,
    draft: MenuDraft,
    source: GenerationSource,
) -> MenuRecord:
    """Assemble the row to persist, embedding the context and targets used."""
    start_date = datetime.now(tz=UTC).date()
    return MenuRecord(
        user_id=params.user_id,
        title=draft.title,
        description=draft.description,
        total_days=len(draft.days),
        start_date=start_date,
        end_date=start_date + timedelta(days=len(draft.days)),
        days=draft.days,
        generation_source=source,
        dietary_category=dietary_category(
            inputs.questionnaire.dietary_style, inputs.context.profile.main_goal
        ),
        totals=draft.totals(),
        adjusted_targets=targets.to_snapshot(),
        context_snapshot=inputs.context.to_snapshot(),
    )


def dietary_category(dietary_style: str | None, goal: MainGoal) -> str:
    """Map the dietary style and goal to a menu category label."""
    style = (dietary_style or "").strip().lower()
    if "vegan" in style:
        return "VEGAN"
    if "vegetarian" in style:
        return "VEGETARIAN"
    if goal == MainGoal.LOSE_WEIGHT:
        return "LOW_CALORIE"
    if goal == MainGoal.GAIN_MUSCLE:
        return "HIGH_PROTEIN"
    return "BALANCED"


def aggregate_shopping_list(plan: MealPlan) -> ShoppingList:
    """Sum ingredient quantities by name and unit across the whole menu."""
    totals: dict[tuple[str, str], ShoppingListItem] = {}
    for day in plan.days:
        for meal in day.meals:
            for ingredient in meal.ingredients:
                key = (ingredient.name.strip().lower(), ingredient.unit.lower())
                existing = totals.get(key)
                if existing is None:
                    totals[key] = ShoppingListItem(
                        name=ingredient.name.strip(),
                        quantity=ingredient.quantity,
                        unit=ingredient.unit,
                        category=ingredient.category,
                    )
                else:
                    totals[key] = ShoppingListItem(
                        name=existing.name,
                        quantity=existing.quantity + ingredient.quantity,
                        unit=existing.unit,
                        category=existing.category,
                    )
    items = sorted(
        (
            ShoppingListItem(item.name, round(item.quantity, 1), item.unit, item.category)
            for item in totals.values()
        ),
        key=lambda item: (item.category.lower(), item.name.lower()),
    )
    return ShoppingList(menu_id=plan.menu_id, items=items)

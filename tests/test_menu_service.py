"""Tests for the menu generation pipeline."""

import asyncio
import json
from uuid import uuid4

import pytest

from menu_personalizer.domain.context import MainGoal
from menu_personalizer.domain.errors import PersistenceError, PreconditionError
from menu_personalizer.domain.menus import GenerateMenuParams, GenerationSource
from menu_personalizer.services.context import ContextService
from menu_personalizer.services.menus import MenuService, dietary_category
from tests.conftest import (
    FailingGenerationClient,
    FixedTextGenerationClient,
    InMemoryContextRepository,
    InMemoryMenuRepository,
)


def _service(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    client,  # type: ignore[no-untyped-def]
) -> MenuService:
    return MenuService(
        context_service=ContextService(context_repository),
        generation_client=client,
        repository=menu_repository,
    )


def _generated_menu(days: int) -> str:
    meal = {
        "name": "Salmon Bowl",
        "meal_type": "DINNER",
        "calories": 600,
        "protein": 40,
        "carbs": 55,
        "fat": 20,
        "ingredients": [
            {"name": "salmon", "quantity": 150, "unit": "g", "category": "protein"},
            {"name": "rice", "quantity": 120, "unit": "g", "category": "grain"},
        ],
    }
    return json.dumps(
        {
            "title": "AI Menu",
            "description": "Generated",
            "days": [{"day_number": d, "meals": [meal]} for d in range(1, days + 1)],
        }
    )


def test_failing_generation_routes_to_fallback(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    client = FailingGenerationClient()
    service = _service(context_repository, menu_repository, client)

    plan = asyncio.run(
        service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=3))
    )

    assert plan.generation_source == GenerationSource.FALLBACK
    assert client.calls == 1
    assert menu_repository.menus == [plan]
    assert plan.total_days == 3
    assert len(plan.days) == 3
    assert (plan.end_date - plan.start_date).days == 3
    assert plan.adjusted_targets["calories"] > 0
    assert plan.context_snapshot["profile"]["user_id"] == str(user_id)


def test_unavailable_generation_routes_to_fallback(
    menu_service: MenuService, menu_repository: InMemoryMenuRepository, user_id
) -> None:
    plan = asyncio.run(
        menu_service.generate_personalized_menu(GenerateMenuParams(user_id=user_id))
    )

    assert plan.generation_source == GenerationSource.FALLBACK
    assert plan.total_days == 7
    assert plan.dietary_category == "LOW_CALORIE"


def test_valid_generation_is_persisted_as_ai(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    client = FixedTextGenerationClient(text=_generated_menu(2))
    service = _service(context_repository, menu_repository, client)

    plan = asyncio.run(
        service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=2))
    )

    assert plan.generation_source == GenerationSource.AI
    assert plan.title == "AI Menu"
    assert plan.totals["calories"] == 1200
    assert client.max_tokens == [2000]
    assert "=== USER PERFORMANCE DATA ===" in client.prompts[0]


def test_malformed_generation_routes_to_fallback(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    client = FixedTextGenerationClient(text=_generated_menu(2))
    service = _service(context_repository, menu_repository, client)

    plan = asyncio.run(
        service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=4))
    )

    assert plan.generation_source == GenerationSource.FALLBACK
    assert len(plan.days) == 4
    assert len(client.prompts) == 1


def test_missing_questionnaire_is_a_precondition_error(
    menu_service: MenuService, menu_repository: InMemoryMenuRepository
) -> None:
    with pytest.raises(PreconditionError):
        asyncio.run(
            menu_service.generate_personalized_menu(GenerateMenuParams(user_id=uuid4()))
        )
    assert menu_repository.menus == []


def test_store_failure_is_a_persistence_error(
    menu_service: MenuService, menu_repository: InMemoryMenuRepository, user_id
) -> None:
    menu_repository.fail_writes = True

    with pytest.raises(PersistenceError):
        asyncio.run(
            menu_service.generate_personalized_menu(GenerateMenuParams(user_id=user_id))
        )
    assert menu_repository.menus == []


def test_history_failure_uses_reduced_prompt(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    context_repository.fail_history = True
    client = FixedTextGenerationClient(text=_generated_menu(1))
    service = _service(context_repository, menu_repository, client)

    plan = asyncio.run(
        service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=1))
    )

    assert plan.generation_source == GenerationSource.AI
    assert client.prompts[0].startswith("Generate a 1-day personalized meal plan.")
    assert plan.context_snapshot["data_completeness"] == 10


def test_custom_menu_requires_request(menu_service: MenuService, user_id) -> None:
    with pytest.raises(ValueError):
        asyncio.run(
            menu_service.generate_custom_menu(
                GenerateMenuParams(user_id=user_id, custom_request="  ")
            )
        )


def test_custom_menu_uses_custom_prompt(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    client = FixedTextGenerationClient(text=_generated_menu(3))
    service = _service(context_repository, menu_repository, client)

    plan = asyncio.run(
        service.generate_custom_menu(
            GenerateMenuParams(user_id=user_id, days=3, custom_request="Quick dinners")
        )
    )

    assert plan.generation_source == GenerationSource.AI
    assert '"Quick dinners"' in client.prompts[0]


def test_shopping_list_aggregates_ingredients(
    context_repository: InMemoryContextRepository,
    menu_repository: InMemoryMenuRepository,
    user_id,
) -> None:
    client = FixedTextGenerationClient(text=_generated_menu(3))
    service = _service(context_repository, menu_repository, client)
    plan = asyncio.run(
        service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=3))
    )

    shopping_list = service.build_shopping_list(user_id, plan.menu_id)

    assert shopping_list is not None
    groups = shopping_list.grouped_by_category()
    assert [(i.name, i.quantity) for i in groups["protein"]] == [("salmon", 450)]
    assert [(i.name, i.quantity) for i in groups["grain"]] == [("rice", 360)]
    assert service.build_shopping_list(uuid4(), plan.menu_id) is None


def test_read_operations(
    menu_service: MenuService, menu_repository: InMemoryMenuRepository, user_id
) -> None:
    first = asyncio.run(
        menu_service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=1))
    )
    second = asyncio.run(
        menu_service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=2))
    )

    assert menu_service.count_menus(user_id) == 2
    assert [p.menu_id for p in menu_service.list_menus(user_id)] == [
        second.menu_id,
        first.menu_id,
    ]
    assert menu_service.get_menu(user_id, first.menu_id) == first
    assert menu_service.get_menu(uuid4(), first.menu_id) is None


def test_dietary_category() -> None:
    assert dietary_category("Vegan", MainGoal.GAIN_MUSCLE) == "VEGAN"
    assert dietary_category("vegetarian", MainGoal.LOSE_WEIGHT) == "VEGETARIAN"
    assert dietary_category("Regular", MainGoal.LOSE_WEIGHT) == "LOW_CALORIE"
    assert dietary_category(None, MainGoal.GAIN_MUSCLE) == "HIGH_PROTEIN"
    assert dietary_category("Regular", MainGoal.MAINTAIN) == "BALANCED"


def test_delete_menu(
    menu_service: MenuService, menu_repository: InMemoryMenuRepository, user_id
) -> None:
    plan = asyncio.run(
        menu_service.generate_personalized_menu(GenerateMenuParams(user_id=user_id, days=1))
    )

    assert menu_service.delete_menu(uuid4(), plan.menu_id) is False
    assert menu_service.delete_menu(user_id, plan.menu_id) is True
    assert menu_repository.menus == []
    assert menu_service.delete_menu(user_id, plan.menu_id) is False

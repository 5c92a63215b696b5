"""Menu API endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status

from menu_personalizer.api.models import CustomMenuRequest, GenerateMenuRequest
from menu_personalizer.domain.errors import (
    FallbackExhaustionError,
    MenuGenerationError,
    PersistenceError,
    PreconditionError,
)
from menu_personalizer.domain.menus import GenerateMenuParams

if TYPE_CHECKING:
    from menu_personalizer.containers import AppContainer

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menus", tags=["menus"])

QUESTIONNAIRE_REQUIRED = (
    "Please complete your questionnaire first before generating a menu"
)


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the authenticated user id set by the upstream auth layer."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_menu(
    body: GenerateMenuRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Generate a personalized menu."""
    container: AppContainer = request.app.state.container
    _ensure_below_limit(container, user_id)
    params = _to_params(user_id, body)
    try:
        plan = await container.menu_service.generate_personalized_menu(params)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    return {"menu": plan.to_dict()}


@router.post("/custom", status_code=status.HTTP_201_CREATED)
async def generate_custom_menu(
    body: CustomMenuRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Generate a menu around a free-text request."""
    container: AppContainer = request.app.state.container
    _ensure_below_limit(container, user_id)
    params = _to_params(user_id, body, custom_request=body.custom_request.strip())
    try:
        plan = await container.menu_service.generate_custom_menu(params)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    return {"menu": plan.to_dict()}


@router.get("")
async def list_menus(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the user's stored menus."""
    container: AppContainer = request.app.state.container
    try:
        plans = container.menu_service.list_menus(user_id)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    limit = container.settings.max_menus_per_user
    return {
        "menus": [plan.to_dict() for plan in plans],
        "max_menus": limit,
        "can_create_more": len(plans) < limit,
    }


@router.get("/{menu_id}")
async def get_menu(
    menu_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return a single stored menu."""
    container: AppContainer = request.app.state.container
    try:
        plan = container.menu_service.get_menu(user_id, menu_id)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    if plan is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return {"menu": plan.to_dict()}


@router.delete("/{menu_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_menu(
    menu_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> Response:
    """Delete a stored menu so a new one can be created."""
    container: AppContainer = request.app.state.container
    try:
        deleted = container.menu_service.delete_menu(user_id, menu_id)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{menu_id}/shopping-list")
async def get_shopping_list(
    menu_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the aggregated ingredients of a menu, grouped by category."""
    container: AppContainer = request.app.state.container
    try:
        shopping_list = container.menu_service.build_shopping_list(user_id, menu_id)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    if shopping_list is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Menu not found")
    return {
        "menu_id": str(menu_id),
        "categories": {
            category: [
                {"name": item.name, "quantity": item.quantity, "unit": item.unit}
                for item in items
            ]
            for category, items in shopping_list.grouped_by_category().items()
        },
    }


def _ensure_below_limit(container: AppContainer, user_id: UUID) -> None:
    limit = container.settings.max_menus_per_user
    try:
        count = container.menu_service.count_menus(user_id)
    except MenuGenerationError as exc:
        raise _to_http_error(exc) from exc
    if count >= limit:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Maximum {limit} menus allowed. "
                "Please delete a menu to create a new one."
            ),
        )


def _to_params(
    user_id: UUID, body: GenerateMenuRequest, custom_request: str | None = None
) -> GenerateMenuParams:
    return GenerateMenuParams(
        user_id=user_id,
        days=body.days,
        meals_per_day=body.meals_per_day,
        custom_request=custom_request,
        budget=body.budget,
        meal_change_frequency=body.meal_change_frequency,
        include_leftovers=body.include_leftovers,
        same_meal_times=body.same_meal_times,
        target_calories=body.target_calories,
        dietary_preferences=frozenset(body.dietary_preferences),
        excluded_ingredients=frozenset(body.excluded_ingredients),
    )


def _to_http_error(exc: MenuGenerationError) -> HTTPException:
    if isinstance(exc, PreconditionError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail=QUESTIONNAIRE_REQUIRED)
    if isinstance(exc, FallbackExhaustionError):
        return HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, PersistenceError):
        _logger.exception("Menu store failure")
        return HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, detail="Menu storage is unavailable"
        )
    _logger.exception("Unexpected menu generation error")
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR)

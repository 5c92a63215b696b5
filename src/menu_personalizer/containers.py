"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from menu_personalizer.adapters.openai_generation_client import OpenAIGenerationClient
from menu_personalizer.adapters.supabase_context_repository import (
    SupabaseContextRepository,
)
from menu_personalizer.adapters.supabase_menu_repository import SupabaseMenuRepository
from menu_personalizer.config import Settings
from menu_personalizer.services.context import ContextService
from menu_personalizer.services.menus import MenuService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    context_service: ContextService
    menu_service: MenuService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    context_service = ContextService(SupabaseContextRepository(supabase_client))
    generation_client = OpenAIGenerationClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.generation_timeout_seconds,
    )
    menu_service = MenuService(
        context_service=context_service,
        generation_client=generation_client,
        repository=SupabaseMenuRepository(supabase_client),
        max_tokens=resolved_settings.generation_max_tokens,
    )

    async def close_resources() -> None:
        await generation_client.close()

    return AppContainer(
        settings=resolved_settings,
        context_service=context_service,
        menu_service=menu_service,
        close_resources=close_resources,
    )

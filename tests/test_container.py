"""Tests for container wiring."""

import asyncio

from menu_personalizer.adapters.openai_generation_client import OpenAIGenerationClient
from menu_personalizer.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.menu_service is not None
    assert container.menu_service.max_tokens == settings.generation_max_tokens
    assert isinstance(container.menu_service.generation_client, OpenAIGenerationClient)
    assert container.menu_service.generation_client.client is not None
    asyncio.run(container.close_resources())


def test_build_container_without_openai_key(settings) -> None:
    container = build_container(settings.model_copy(update={"openai_api_key": None}))
    client = container.menu_service.generation_client
    assert isinstance(client, OpenAIGenerationClient)
    assert client.client is None
    asyncio.run(container.close_resources())

"""OpenAI chat completions client for menu generation."""

import asyncio
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from menu_personalizer.domain.errors import (
    GenerationFailedError,
    GenerationUnavailableError,
)
from menu_personalizer.services.generation import MENU_SCHEMA, GenerationClient

MAX_COMPLETION_TOKENS = 4096
SYSTEM_MESSAGE = (
    "You are a professional nutritionist and meal planner. "
    "Respond with valid JSON only, without markdown fences or commentary."
)


@dataclass
class OpenAIGenerationClient(GenerationClient):
    """Generation client backed by the OpenAI chat completions API."""

    client: AsyncOpenAI | None
    model: str = "gpt-4o-mini"
    timeout_seconds: float = 30

    @classmethod
    def create(
        cls, api_key: str | None, model: str, timeout_seconds: float
    ) -> "OpenAIGenerationClient":
        """Create a client; without an API key every call reports unavailability."""
        client = AsyncOpenAI(api_key=api_key) if api_key else None
        return cls(client=client, model=model, timeout_seconds=timeout_seconds)

    async def generate(self, prompt: str, max_tokens: int) -> str:
        """Call the chat completions API and return the message text."""
        if self.client is None:
            raise GenerationUnavailableError("OpenAI API key is not configured")
        try:
            async with asyncio.timeout(self.timeout_seconds):
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_MESSAGE},
                        {"role": "user", "content": prompt},
                    ],
                    max_completion_tokens=min(max_tokens, MAX_COMPLETION_TOKENS),
                    response_format={
                        "type": "json_schema",
                        "json_schema": {
                            "name": "menu",
                            "strict": True,
                            "schema": MENU_SCHEMA,
                        },
                    },
                )
        except TimeoutError as exc:
            raise GenerationFailedError(
                f"OpenAI request timed out after {self.timeout_seconds}s"
            ) from exc
        except openai.OpenAIError as exc:
            raise GenerationFailedError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise GenerationFailedError("OpenAI returned an empty response")
        return strip_code_fences(content)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self.client is not None:
            await self.client.close()


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()

"""Interface to the external text generation service."""

from typing import Protocol

_NUMBER = {"type": "number", "minimum": 0}
_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}

MENU_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "days": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "day_number": {"type": "integer", "minimum": 1},
                    "meals": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string"},
                                "meal_type": {"type": "string"},
                                "calories": _NUMBER,
                                "protein": _NUMBER,
                                "carbs": _NUMBER,
                                "fat": _NUMBER,
                                "fiber": _NUMBER,
                                "prep_time_minutes": {"type": "integer", "minimum": 0},
                                "cooking_method": _NULLABLE_STRING,
                                "instructions": _NULLABLE_STRING,
                                "ingredients": {
                                    "type": "array",
                                    "items": {
                                        "type": "object",
                                        "properties": {
                                            "name": {"type": "string"},
                                            "quantity": _NUMBER,
                                            "unit": {"type": "string"},
                                            "category": {"type": "string"},
                                        },
                                        "required": ["name", "quantity", "unit", "category"],
                                        "additionalProperties": False,
                                    },
                                },
                            },
                            "required": [
                                "name",
                                "meal_type",
                                "calories",
                                "protein",
                                "carbs",
                                "fat",
                                "fiber",
                                "prep_time_minutes",
                                "cooking_method",
                                "instructions",
                                "ingredients",
                            ],
                            "additionalProperties": False,
                        },
                    },
                },
                "required": ["day_number", "meals"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["title", "description", "days"],
    "additionalProperties": False,
}


class GenerationClient(Protocol):
    """Interface for menu text generation."""

    async def generate(self, prompt: str, max_tokens: int) -> str:
        """Return raw generated text shaped by MENU_SCHEMA.

        Raises:
            GenerationUnavailableError: no credential is configured.
            GenerationFailedError: the call failed, timed out or returned nothing.
        """

"""Validation of generated menu text."""

import json
import re

from pydantic import ValidationError

from menu_personalizer.domain.errors import MalformedGenerationError
from menu_personalizer.domain.menus import MenuDraft

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def parse_menu(raw_text: str, expected_days: int) -> MenuDraft:
    """Parse generated text into a menu draft or reject it as a whole.

    Accepts the ``days`` layout and the older flat ``meals`` list keyed by
    ``day_number``.

    Raises:
        MalformedGenerationError: the text is not a complete, valid menu for
            ``expected_days`` days.
    """
    payload = _decode(raw_text)
    if "days" not in payload and isinstance(payload.get("meals"), list):
        payload = {**payload, "days": _group_meals_by_day(payload["meals"])}
    payload.setdefault("title", f"{expected_days}-Day Menu")

    try:
        draft = MenuDraft.model_validate(payload)
    except ValidationError as exc:
        raise MalformedGenerationError(f"Menu failed validation: {exc}") from exc

    day_numbers = [day.day_number for day in draft.days]
    if sorted(day_numbers) != list(range(1, expected_days + 1)):
        raise MalformedGenerationError(
            f"Expected days 1..{expected_days}, got {sorted(day_numbers)}"
        )
    draft.days.sort(key=lambda day: day.day_number)
    return draft


def _decode(raw_text: str) -> dict[str, object]:
    cleaned = _FENCE.sub("", raw_text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise MalformedGenerationError("No JSON object found in generated text")
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned[start : end + 1])
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedGenerationError(f"Generated text is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedGenerationError("Generated JSON is not an object")
    return payload


def _group_meals_by_day(meals: list[object]) -> list[dict[str, object]]:
    by_day: dict[int, list[object]] = {}
    for meal in meals:
        if not isinstance(meal, dict):
            raise MalformedGenerationError("Meal entry is not an object")
        day_number = meal.get("day_number")
        if not isinstance(day_number, int) or isinstance(day_number, bool):
            raise MalformedGenerationError("Meal entry has no integer day_number")
        by_day.setdefault(day_number, []).append(meal)
    return [
        {"day_number": day_number, "meals": by_day[day_number]}
        for day_number in sorted(by_day)
    ]

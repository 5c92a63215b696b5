"""Supabase repository for generated menus."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from menu_personalizer.domain.menus import (
    PLAN_SCHEMA_VERSION,
    GenerationSource,
    MealPlan,
    MenuRecord,
    PlannedDay,
)
from menu_personalizer.services.menus import MenuRepository

_COLUMNS = (
    "id, user_id, title, description, total_days, start_date, end_date, days, "
    "generation_source, dietary_category, totals, adjusted_targets, "
    "context_snapshot, schema_version, created_at"
)


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase implementation for recommended menus."""

    client: Client

    def create_menu(self, record: MenuRecord) -> MealPlan:
        """Insert a menu row with its embedded snapshots."""
        response = (
            self.client.table("recommended_menus")
            .insert(
                {
                    "user_id": str(record.user_id),
                    "title": record.title,
                    "description": record.description,
                    "total_days": record.total_days,
                    "start_date": record.start_date.isoformat(),
                    "end_date": record.end_date.isoformat(),
                    "days": [day.model_dump() for day in record.days],
                    "generation_source": record.generation_source.value,
                    "dietary_category": record.dietary_category,
                    "totals": record.totals,
                    "adjusted_targets": record.adjusted_targets,
                    "context_snapshot": record.context_snapshot,
                    "schema_version": record.schema_version,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create menu")
        return _parse_menu(response.data[0])

    def get_menu(self, user_id: UUID, menu_id: UUID) -> MealPlan | None:
        """Return one of the user's menus by id."""
        response = (
            self.client.table("recommended_menus")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("id", str(menu_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_menu(response.data[0])

    def list_menus(self, user_id: UUID) -> list[MealPlan]:
        """Return the user's menus, newest first."""
        response = (
            self.client.table("recommended_menus")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_menu(row) for row in response.data or []]

    def count_menus(self, user_id: UUID) -> int:
        """Return how many menus the user has stored."""
        response = (
            self.client.table("recommended_menus")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .execute()
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def delete_menu(self, user_id: UUID, menu_id: UUID) -> bool:
        """Delete one of the user's menus by id."""
        response = (
            self.client.table("recommended_menus")
            .delete()
            .eq("user_id", str(user_id))
            .eq("id", str(menu_id))
            .execute()
        )
        return bool(response.data)


def _parse_menu(row: dict[str, object]) -> MealPlan:
    created_at_raw = row.get("created_at")
    return MealPlan(
        menu_id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        total_days=int(row.get("total_days") or 0),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        end_date=date.fromisoformat(str(row["end_date"])[:10]),
        days=[PlannedDay.model_validate(day) for day in row.get("days") or []],
        generation_source=GenerationSource(str(row.get("generation_source"))),
        dietary_category=str(row.get("dietary_category") or "BALANCED"),
        totals=dict(row.get("totals") or {}),
        adjusted_targets=dict(row.get("adjusted_targets") or {}),
        context_snapshot=dict(row.get("context_snapshot") or {}),
        schema_version=int(row.get("schema_version") or PLAN_SCHEMA_VERSION),
        created_at=(
            datetime.fromisoformat(created_at_raw)
            if isinstance(created_at_raw, str) and created_at_raw
            else None
        ),
    )

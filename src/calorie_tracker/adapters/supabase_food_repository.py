"""Supabase repository for logged foods."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_tracker.domain.foods import FoodEntry
from calorie_tracker.services.entries import FoodEntryRepository

_COLUMNS = "user_id, food_name, calories, created_at"


@dataclass
class SupabaseFoodRepository(FoodEntryRepository):
    """Supabase implementation for the ``foods`` table."""

    client: Client

    def create_entry(
        self, user_id: int, food_name: str, calories: int, created_at: datetime
    ) -> FoodEntry:
        """Insert a food row and return the stored entry."""
        response = (
            self.client.table("foods")
            .insert(
                {
                    "user_id": user_id,
                    "food_name": food_name,
                    "calories": calories,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_row(response.data[0])

    def list_entries(
        self, user_id: int, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return foods logged in the time range."""
        response = (
            self.client.table("foods")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def search_entries(self, user_id: int, query: str) -> list[FoodEntry]:
        """Return foods whose name contains the query, ignoring case."""
        response = (
            self.client.table("foods")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .ilike("food_name", f"%{_escape_like(query)}%")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_row(row: dict[str, object]) -> FoodEntry:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return FoodEntry(
        food_name=str(row.get("food_name", "")),
        calories=int(row.get("calories") or 0),
        created_at=created_at,
        user_id=int(row.get("user_id") or 0),
    )

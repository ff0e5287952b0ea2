"""Food log service: resolve, store and query logged foods."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from calorie_tracker.domain.foods import DailyLog, FoodEntry
from calorie_tracker.services.calories import CalorieResolver


class InvalidFoodNameError(ValueError):
    """Raised when a submitted food name is blank."""


class FoodEntryRepository(Protocol):
    """Persistence interface for logged foods."""

    def create_entry(
        self, user_id: int, food_name: str, calories: int, created_at: datetime
    ) -> FoodEntry:
        """Persist a food entry and return it."""

    def list_entries(
        self, user_id: int, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return entries created in ``[start, end)``, newest first."""

    def search_entries(self, user_id: int, query: str) -> list[FoodEntry]:
        """Return entries whose name contains the query, newest first."""


@dataclass
class FoodLogService:
    """Service that logs foods for the configured user."""

    resolver: CalorieResolver
    repository: FoodEntryRepository
    user_id: int = 1
    timezone_name: str = "UTC"

    async def add_entry(self, food_name: str) -> FoodEntry:
        """Resolve calories for a food name and persist the entry."""
        cleaned = food_name.strip()
        if not cleaned:
            raise InvalidFoodNameError("Please enter a food name.")
        calories = await self.resolver.resolve(cleaned)
        return self.repository.create_entry(
            user_id=self.user_id,
            food_name=cleaned,
            calories=calories,
            created_at=datetime.now(tz=UTC),
        )

    def today(self) -> date:
        """Return today's date in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone_name)).date()

    def get_today(self) -> DailyLog:
        """Return today's entries and total."""
        return self.get_day(self.today())

    def get_day(self, day: date) -> DailyLog:
        """Return entries and total for a calendar day in the configured timezone."""
        tz = ZoneInfo(self.timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        entries = self.repository.list_entries(
            self.user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return DailyLog(
            day=day,
            entries=entries,
            total_calories=sum(entry.calories for entry in entries),
        )

    def search(self, query: str) -> list[FoodEntry]:
        """Return logged foods whose name contains the query."""
        cleaned = query.strip()
        if not cleaned:
            return []
        return self.repository.search_entries(self.user_id, cleaned)

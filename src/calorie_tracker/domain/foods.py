"""Food logging domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class FoodEntry:
    """A logged food with its resolved calorie value."""

    food_name: str
    calories: int
    created_at: datetime
    user_id: int


@dataclass(frozen=True)
class Nutrient:
    """A single nutrient reported for a candidate food."""

    name: str
    unit: str
    value: float | None


@dataclass(frozen=True)
class CandidateFood:
    """A food returned by the nutrition search API."""

    description: str
    category: str | None
    nutrients: list[Nutrient] = field(default_factory=list)


@dataclass(frozen=True)
class FoodQuery:
    """Free-text food input split into search text and optional weight."""

    text: str
    grams: int | None


@dataclass(frozen=True)
class DailyLog:
    """Entries logged on a single day with their calorie total."""

    day: date
    entries: list[FoodEntry]
    total_calories: int

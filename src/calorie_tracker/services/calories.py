"""Calorie resolution backed by USDA FDC search."""

import logging
import math
import re
from dataclasses import dataclass

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.domain.foods import CandidateFood, FoodQuery, Nutrient

FALLBACK_CALORIES = 100
"""Calorie estimate used when a food cannot be resolved."""

_WEIGHT_PATTERN = re.compile(r"(\d+)\s*g(?:rams?)?\b")
_SIMPLE_FOOD_CATEGORIES = ("fruit", "meat")
_ENERGY_NUTRIENT = "energy"
_KCAL_UNIT = "kcal"

_logger = logging.getLogger(__name__)


def parse_food_query(raw: str) -> FoodQuery:
    """Lowercase input and split off the first ``<digits>g`` weight, if any."""
    lowered = raw.lower()
    match = _WEIGHT_PATTERN.search(lowered)
    if match is None:
        return FoodQuery(text=" ".join(lowered.split()), grams=None)
    cleaned = lowered[: match.start()] + lowered[match.end() :]
    return FoodQuery(text=" ".join(cleaned.split()), grams=int(match.group(1)))


def parse_candidates(payload: dict[str, object]) -> list[CandidateFood]:
    """Convert an FDC search payload into candidate foods."""
    foods = payload.get("foods") or []
    if not isinstance(foods, list):
        raise TypeError("FDC search payload 'foods' is not a list")
    candidates: list[CandidateFood] = []
    for food in foods:
        category = food.get("foodCategory")
        nutrients = [
            Nutrient(
                name=str(nutrient.get("nutrientName") or ""),
                unit=str(nutrient.get("unitName") or ""),
                value=_to_float(nutrient.get("value")),
            )
            for nutrient in food.get("foodNutrients") or []
        ]
        candidates.append(
            CandidateFood(
                description=str(food.get("description") or ""),
                category=category if isinstance(category, str) else None,
                nutrients=nutrients,
            )
        )
    return candidates


def extract_calories(candidate: CandidateFood) -> float | None:
    """Return kcal per 100g from the candidate's energy nutrient, if usable."""
    for nutrient in candidate.nutrients:
        if (
            _ENERGY_NUTRIENT in nutrient.name.lower()
            and nutrient.unit.lower() == _KCAL_UNIT
        ):
            value = nutrient.value
            if value is None or not math.isfinite(value) or value < 0:
                return None
            return value
    return None


def choose_candidate(query: str, candidates: list[CandidateFood]) -> CandidateFood:
    """Pick the candidate that best matches the cleaned query text.

    Single-word queries prefer fruit or meat categories so that "apple" lands on
    the raw fruit rather than "apple pie". Everything else falls back to the
    first description containing the query, then to the first result.
    """
    if not candidates:
        raise ValueError("No candidates to choose from")
    if len(query.split()) == 1:
        for candidate in candidates:
            if _is_simple_food(candidate):
                return candidate
    for candidate in candidates:
        if query in candidate.description.lower():
            return candidate
    return candidates[0]


def scale_calories(base_calories: float, grams: int | None) -> int:
    """Scale a per-100g calorie value to the requested weight."""
    scaled = base_calories if grams is None else base_calories * grams / 100
    if not math.isfinite(scaled):
        raise OverflowError(f"Scaled calories are not finite: {scaled}")
    return _round_half_up(scaled)


@dataclass
class CalorieResolver:
    """Resolve free-text food names into calorie estimates."""

    fdc_client: FdcClient
    fallback_calories: int = FALLBACK_CALORIES
    page_size: int = 50

    async def resolve(self, food_name: str) -> int:
        """Return estimated calories for a food name, never raising on lookup."""
        query = parse_food_query(food_name)
        if not query.text:
            _logger.info("Empty food query after parsing %r, using fallback", food_name)
            return self.fallback_calories
        try:
            payload = await self.fdc_client.search_foods(
                query.text, page_size=self.page_size
            )
            candidates = parse_candidates(payload)
        except Exception as exc:
            _logger.exception(
                "FDC lookup failed for %r (status=%s)",
                query.text,
                _status_code_from_exception(exc),
            )
            return self.fallback_calories

        if not candidates:
            _logger.info("No FDC results for %r, using fallback", query.text)
            return self.fallback_calories

        chosen = choose_candidate(query.text, candidates)
        base_calories = extract_calories(chosen)
        if base_calories is None:
            _logger.info(
                "No energy value for %r (matched %r), using fallback",
                query.text,
                chosen.description,
            )
            return self.fallback_calories
        try:
            return scale_calories(base_calories, query.grams)
        except (ValueError, OverflowError):
            _logger.warning(
                "Calories for %r out of range (base=%s, grams=%s), using fallback",
                query.text,
                base_calories,
                query.grams,
            )
            return self.fallback_calories


def _is_simple_food(candidate: CandidateFood) -> bool:
    if not candidate.category:
        return False
    category = candidate.category.lower()
    return any(keyword in category for keyword in _SIMPLE_FOOD_CATEGORIES)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"

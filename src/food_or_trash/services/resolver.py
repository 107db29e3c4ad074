"""Tiered local resolution: exact match, then fuzzy match."""

import logging
from dataclasses import dataclass

from food_or_trash.domain.items import FoodEntry, TrashEntry
from food_or_trash.domain.results import LookupResult
from food_or_trash.services.matcher import FuzzyCandidate, SearchIndex

_logger = logging.getLogger(__name__)


@dataclass
class Resolver:
    """Resolve queries against the local item database."""

    index: SearchIndex

    def resolve(self, query: str) -> LookupResult | None:
        """Resolve a query, using exact matching only for multi-word input.

        Fuzzy matching on multi-word input can map a dish onto one of its
        ingredients, so only single words get typo tolerance.
        """
        normalized = query.strip().lower()
        if not normalized:
            return None
        if is_multi_word(normalized):
            return self.lookup_exact(normalized)
        return self.lookup(normalized)

    def lookup_exact(self, query: str) -> LookupResult | None:
        """Match a name or alias exactly, checking trash before food."""
        normalized = query.strip().lower()
        if not normalized:
            return None
        trash_entry = self.index.find_trash_exact(normalized)
        if trash_entry is not None:
            return trash_result(trash_entry)
        food_entry = self.index.find_food_exact(normalized)
        if food_entry is not None:
            return food_result(food_entry)
        return None

    def lookup(self, query: str) -> LookupResult | None:
        """Match exactly, then fall back to fuzzy search over both collections."""
        normalized = query.strip().lower()
        if not normalized:
            return None
        exact = self.lookup_exact(normalized)
        if exact is not None:
            return exact
        result = pick_fuzzy_match(
            food=self.index.foods.best(normalized),
            trash=self.index.trash.best(normalized),
            threshold=self.index.threshold,
        )
        if result is not None:
            _logger.debug(
                "Fuzzy match: query=%s verdict=%s", normalized, result.verdict
            )
        return result


def pick_fuzzy_match(
    food: FuzzyCandidate | None,
    trash: FuzzyCandidate | None,
    threshold: float,
) -> LookupResult | None:
    """Arbitrate between the best food and trash fuzzy candidates.

    A trash candidate under the threshold wins unless the food candidate is
    strictly closer; equal distances go to trash.
    """
    if trash is not None and trash.distance < threshold:
        if food is not None and food.distance < trash.distance:
            return food_result(_as_food(food.entry))
        return trash_result(_as_trash(trash.entry))
    if food is not None and food.distance < threshold:
        return food_result(_as_food(food.entry))
    return None


def is_multi_word(query: str) -> bool:
    """Return True when the query has more than one whitespace-separated word."""
    return len(query.split()) > 1


def food_result(entry: FoodEntry) -> LookupResult:
    """Wrap a food entry as a local lookup result."""
    return LookupResult(
        found=True,
        source="local",
        verdict="food",
        score=entry.score,
        calories=entry.calories,
        item=entry,
    )


def trash_result(entry: TrashEntry) -> LookupResult:
    """Wrap a trash entry as a local lookup result."""
    return LookupResult(
        found=True,
        source="local",
        verdict="trash",
        score=entry.score,
        calories=entry.calories,
        trash_item=entry,
    )


def _as_food(entry: object) -> FoodEntry:
    if not isinstance(entry, FoodEntry):
        raise TypeError(f"Expected a food entry, got {type(entry).__name__}")
    return entry


def _as_trash(entry: object) -> TrashEntry:
    if not isinstance(entry, TrashEntry):
        raise TypeError(f"Expected a trash entry, got {type(entry).__name__}")
    return entry

"""Exact and fuzzy matching over the curated collections."""

from dataclasses import dataclass

from rapidfuzz import fuzz

from food_or_trash.domain.items import Entry, FoodEntry, ItemDatabase, TrashEntry

DEFAULT_FUZZY_THRESHOLD = 0.3

# Per-key exponents: the 2:1 name-to-alias weighting normalized to sum to 1.
_NAME_WEIGHT = 2 / 3
_ALIAS_WEIGHT = 1 / 3


@dataclass(frozen=True)
class FuzzyCandidate:
    """An entry matched approximately, with its distance (0 = perfect)."""

    entry: Entry
    distance: float


@dataclass(frozen=True)
class _IndexedEntry:
    entry: Entry
    name: str
    aliases: tuple[str, ...]


class CollectionIndex:
    """Immutable exact and fuzzy lookup structure for one collection."""

    def __init__(self, entries: tuple[Entry, ...], threshold: float) -> None:
        self._threshold = threshold
        self._entries = tuple(
            _IndexedEntry(
                entry=entry,
                name=entry.name.lower(),
                aliases=tuple(alias.lower() for alias in entry.aliases),
            )
            for entry in entries
        )
        exact: dict[str, Entry] = {}
        for indexed in self._entries:
            for key in (indexed.name, *indexed.aliases):
                exact.setdefault(key, indexed.entry)
        self._exact = exact

    def __len__(self) -> int:
        return len(self._entries)

    def find_exact(self, query: str) -> Entry | None:
        """Return the first entry whose name or alias equals the query."""
        return self._exact.get(query.strip().lower())

    def search(self, query: str) -> list[FuzzyCandidate]:
        """Return fuzzy candidates ordered by distance, then collection order."""
        normalized = query.strip().lower()
        if not normalized:
            return []
        candidates: list[FuzzyCandidate] = []
        for indexed in self._entries:
            distance = self._entry_distance(normalized, indexed)
            if distance is not None:
                candidates.append(
                    FuzzyCandidate(entry=indexed.entry, distance=distance)
                )
        candidates.sort(key=lambda candidate: candidate.distance)
        return candidates

    def best(self, query: str) -> FuzzyCandidate | None:
        """Return the closest fuzzy candidate within the threshold, if any."""
        candidates = self.search(query)
        if candidates and candidates[0].distance < self._threshold:
            return candidates[0]
        return None

    def _entry_distance(self, query: str, indexed: _IndexedEntry) -> float | None:
        """Combine per-key distances; keys outside the threshold are ignored."""
        name_distance = _distance(query, indexed.name)
        alias_distance = min(
            (_distance(query, alias) for alias in indexed.aliases), default=1.0
        )
        total = 1.0
        matched = False
        for distance, weight in (
            (name_distance, _NAME_WEIGHT),
            (alias_distance, _ALIAS_WEIGHT),
        ):
            if distance < self._threshold:
                total *= distance**weight
                matched = True
        return total if matched else None


@dataclass(frozen=True)
class SearchIndex:
    """Search structures for both collections, built once at startup."""

    foods: CollectionIndex
    trash: CollectionIndex
    threshold: float

    @classmethod
    def build(
        cls, database: ItemDatabase, threshold: float = DEFAULT_FUZZY_THRESHOLD
    ) -> "SearchIndex":
        """Build the index from an item database."""
        return cls(
            foods=CollectionIndex(database.foods, threshold),
            trash=CollectionIndex(database.trash, threshold),
            threshold=threshold,
        )

    def find_food_exact(self, query: str) -> FoodEntry | None:
        """Return an exact food match."""
        entry = self.foods.find_exact(query)
        return entry if isinstance(entry, FoodEntry) else None

    def find_trash_exact(self, query: str) -> TrashEntry | None:
        """Return an exact trash match."""
        entry = self.trash.find_exact(query)
        return entry if isinstance(entry, TrashEntry) else None


def _distance(query: str, value: str) -> float:
    """Normalized edit distance between two lowercase strings."""
    return 1.0 - fuzz.ratio(query, value) / 100.0

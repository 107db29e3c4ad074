"""Read-only browsing of the curated item database."""

import math
import re
from dataclasses import dataclass

from food_or_trash.domain.items import (
    Entry,
    ItemDatabase,
    ItemKind,
    category_label,
)

RELATED_LIMIT = 6

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class CatalogItem:
    """An entry tagged with the collection it belongs to."""

    kind: ItemKind
    entry: Entry


@dataclass(frozen=True)
class ItemDetail:
    """An entry with related entries from the same category."""

    kind: ItemKind
    entry: Entry
    related: tuple[Entry, ...]


@dataclass(frozen=True)
class CategorySummary:
    """Counts for one category across both collections."""

    category: str
    label: str
    food_count: int
    trash_count: int


@dataclass(frozen=True)
class CategoryListing:
    """All entries of a category, best score first."""

    category: str
    label: str
    items: tuple[CatalogItem, ...]
    food_count: int
    trash_count: int
    average_score: int


@dataclass
class CatalogService:
    """Lookups used by item and category pages."""

    database: ItemDatabase

    def get_item(self, slug: str) -> ItemDetail | None:
        """Find an entry by slug, food collection first."""
        for kind, entries in self._collections():
            for entry in entries:
                if slugify(entry.name) != slug:
                    continue
                related = [
                    other
                    for other in entries
                    if other.category == entry.category and other.name != entry.name
                ]
                return ItemDetail(
                    kind=kind, entry=entry, related=tuple(related[:RELATED_LIMIT])
                )
        return None

    def list_categories(self) -> list[CategorySummary]:
        """Return every category in first-seen order with per-collection counts."""
        counts: dict[str, list[int]] = {}
        for entry in self.database.foods:
            counts.setdefault(entry.category, [0, 0])[0] += 1
        for entry in self.database.trash:
            counts.setdefault(entry.category, [0, 0])[1] += 1
        return [
            CategorySummary(
                category=category,
                label=category_label(category),
                food_count=food_count,
                trash_count=trash_count,
            )
            for category, (food_count, trash_count) in counts.items()
        ]

    def items_in_category(self, category: str) -> CategoryListing | None:
        """Return the entries of a category sorted by score, or None if empty."""
        items = [
            CatalogItem(kind=kind, entry=entry)
            for kind, entries in self._collections()
            for entry in entries
            if entry.category == category
        ]
        if not items:
            return None
        items.sort(key=lambda item: item.entry.score, reverse=True)
        food_count = sum(1 for item in items if item.kind == "food")
        average = sum(item.entry.score for item in items) / len(items)
        return CategoryListing(
            category=category,
            label=category_label(category),
            items=tuple(items),
            food_count=food_count,
            trash_count=len(items) - food_count,
            average_score=math.floor(average + 0.5),
        )

    def _collections(self) -> list[tuple[ItemKind, tuple[Entry, ...]]]:
        return [("food", self.database.foods), ("trash", self.database.trash)]


def slugify(name: str) -> str:
    """Lowercase a name and collapse non-alphanumerics into single dashes."""
    return _SLUG_SEPARATORS.sub("-", name.lower()).strip("-")


def score_color(score: int) -> str:
    """Return the display colour band for a score."""
    if score <= 30:
        return "#ff1a1a"
    if score <= 45:
        return "#ff6633"
    if score <= 55:
        return "#ddaa00"
    if score <= 70:
        return "#88cc33"
    return "#00cc66"

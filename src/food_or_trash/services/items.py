"""Loading and validation of the curated item collections."""

import logging
from collections.abc import Mapping
from typing import Protocol

from food_or_trash.domain.items import FoodEntry, ItemDatabase, TrashEntry

_logger = logging.getLogger(__name__)


class ItemDataError(RuntimeError):
    """Raised when persisted item data cannot be loaded."""


class ItemRepository(Protocol):
    """Source of the raw food and trash collections."""

    def list_foods(self) -> list[dict[str, object]]:
        """Return food rows in collection order."""

    def list_trash(self) -> list[dict[str, object]]:
        """Return trash rows in collection order."""


def load_item_database(repository: ItemRepository) -> ItemDatabase:
    """Load both collections once and freeze them into an ItemDatabase."""
    foods = tuple(food_entry_from_row(row) for row in repository.list_foods())
    trash = tuple(trash_entry_from_row(row) for row in repository.list_trash())
    _ensure_unique_names("foods", [entry.name for entry in foods])
    _ensure_unique_names("trash", [entry.name for entry in trash])
    _logger.info("Loaded item database: foods=%s trash=%s", len(foods), len(trash))
    return ItemDatabase(foods=foods, trash=trash)


def food_entry_from_row(row: Mapping[str, object]) -> FoodEntry:
    """Convert a persisted food row into a FoodEntry."""
    try:
        return FoodEntry(
            name=_canonical_name(row["name"]),
            category=str(row["category"]),
            aliases=_aliases(row.get("aliases")),
            score=_bounded_int(row["score"], 0, 100),
            calories=_bounded_int(row.get("calories") or 0, 0, None),
            fun_fact=str(row.get("fun_fact") or ""),
            explanation=_optional_text(row.get("explanation")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ItemDataError(f"Invalid food row: {row!r}") from exc


def trash_entry_from_row(row: Mapping[str, object]) -> TrashEntry:
    """Convert a persisted trash row into a TrashEntry."""
    try:
        return TrashEntry(
            name=_canonical_name(row["name"]),
            category=str(row["category"]),
            aliases=_aliases(row.get("aliases")),
            score=_bounded_int(row["score"], 0, 100),
            calories=_bounded_int(row.get("calories") or 0, 0, None),
            reason=str(row.get("reason") or ""),
            explanation=_optional_text(row.get("explanation")),
            swap=_optional_text(row.get("swap")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ItemDataError(f"Invalid trash row: {row!r}") from exc


def _canonical_name(value: object) -> str:
    name = str(value).strip().lower()
    if not name:
        raise ValueError("name must not be empty")
    return name


def _aliases(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, list | tuple):
        raise TypeError("aliases must be a list of strings")
    if not all(isinstance(alias, str) for alias in value):
        raise TypeError("aliases must be a list of strings")
    return tuple(alias.strip() for alias in value if alias.strip())


def _bounded_int(value: object, low: int, high: int | None) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        raise TypeError(f"expected a number, got {value!r}")
    number = int(value)
    if number < low or (high is not None and number > high):
        raise ValueError(f"{number} is out of range")
    return number


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _ensure_unique_names(collection: str, names: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ItemDataError(f"Duplicate name in {collection}: {name}")
        seen.add(name)

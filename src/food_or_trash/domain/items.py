"""Domain models for the curated item database."""

from dataclasses import dataclass
from typing import Literal

ItemKind = Literal["food", "trash"]

CATEGORY_LABELS: dict[str, str] = {
    "fruit": "Fruit",
    "vegetable": "Vegetable",
    "grain": "Grain",
    "legume": "Legume",
    "nut": "Nut",
    "seed": "Seed",
    "meat": "Meat",
    "poultry": "Poultry",
    "fish": "Fish",
    "shellfish": "Shellfish",
    "dairy": "Dairy",
    "egg": "Egg",
    "herb": "Herb",
    "spice": "Spice",
    "oil": "Oil",
    "sweetener": "Sweetener",
    "fermented": "Fermented",
    "fungi": "Fungi",
    "seaweed": "Seaweed",
    "beverage": "Beverage",
    "seed oil": "Seed Oil",
    "seed oil product": "Seed Oil Product",
    "seed oil derivative": "Seed Oil Derivative",
    "ultra-processed": "Ultra-Processed",
    "processed meat": "Processed Meat",
    "deep fried": "Deep Fried",
    "fast food": "Fast Food",
}


@dataclass(frozen=True)
class FoodEntry:
    """A whole food from the curated food collection."""

    name: str
    category: str
    aliases: tuple[str, ...]
    score: int
    calories: int
    fun_fact: str
    explanation: str | None = None


@dataclass(frozen=True)
class TrashEntry:
    """An industrial or ultra-processed item from the trash collection."""

    name: str
    category: str
    aliases: tuple[str, ...]
    score: int
    calories: int
    reason: str
    explanation: str | None = None
    swap: str | None = None


Entry = FoodEntry | TrashEntry


@dataclass(frozen=True)
class ItemDatabase:
    """Both curated collections, loaded once and never mutated."""

    foods: tuple[FoodEntry, ...]
    trash: tuple[TrashEntry, ...]


def category_label(category: str) -> str:
    """Return the display label for a category tag."""
    return CATEGORY_LABELS.get(category, category)

"""Item repository reading the bundled JSON collections."""

import json
from dataclasses import dataclass
from pathlib import Path

from food_or_trash.services.items import ItemDataError, ItemRepository

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@dataclass
class JsonItemRepository(ItemRepository):
    """Loads foods.json and trash.json from a directory."""

    directory: Path = DEFAULT_DATA_DIR

    def list_foods(self) -> list[dict[str, object]]:
        """Return food rows from foods.json."""
        return self._read("foods.json")

    def list_trash(self) -> list[dict[str, object]]:
        """Return trash rows from trash.json."""
        return self._read("trash.json")

    def _read(self, filename: str) -> list[dict[str, object]]:
        path = self.directory / filename
        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ItemDataError(f"Failed to read {path}") from exc
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise ItemDataError(f"{path} must contain a list of objects")
        return rows

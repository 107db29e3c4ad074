"""Supabase-backed item repository."""

from dataclasses import dataclass

from supabase import Client

from food_or_trash.services.items import ItemRepository

_FOOD_COLUMNS = "name, category, aliases, score, calories, fun_fact, explanation"
_TRASH_COLUMNS = "name, category, aliases, score, calories, reason, explanation, swap"


@dataclass
class SupabaseItemRepository(ItemRepository):
    """Supabase implementation reading the foods and trash tables."""

    client: Client

    def list_foods(self) -> list[dict[str, object]]:
        """Return food rows in insertion order."""
        response = (
            self.client.table("foods").select(_FOOD_COLUMNS).order("id").execute()
        )
        return list(response.data or [])

    def list_trash(self) -> list[dict[str, object]]:
        """Return trash rows in insertion order."""
        response = (
            self.client.table("trash").select(_TRASH_COLUMNS).order("id").execute()
        )
        return list(response.data or [])

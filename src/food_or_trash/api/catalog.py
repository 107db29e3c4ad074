"""Catalog endpoints for browsing the curated items."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from food_or_trash.services.catalog import score_color, slugify

if TYPE_CHECKING:
    from food_or_trash.containers import AppContainer

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/items/{slug}")
async def item_detail(slug: str, request: Request) -> dict[str, object]:
    """Return an item with related items from its category."""
    container: AppContainer = request.app.state.container
    detail = container.catalog_service.get_item(slug)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {
        "kind": detail.kind,
        "slug": slugify(detail.entry.name),
        "item": asdict(detail.entry),
        "color": score_color(detail.entry.score),
        "related": [
            {"slug": slugify(entry.name), "name": entry.name, "score": entry.score}
            for entry in detail.related
        ],
    }


@router.get("/categories")
async def list_categories(request: Request) -> dict[str, object]:
    """Return all categories with item counts."""
    container: AppContainer = request.app.state.container
    return {
        "categories": [
            asdict(summary) for summary in container.catalog_service.list_categories()
        ]
    }


@router.get("/categories/{category}")
async def category_detail(category: str, request: Request) -> dict[str, object]:
    """Return every item in a category, best score first."""
    container: AppContainer = request.app.state.container
    listing = container.catalog_service.items_in_category(category)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return asdict(listing)

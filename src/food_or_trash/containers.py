"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_or_trash.adapters.json_item_repository import (
    DEFAULT_DATA_DIR,
    JsonItemRepository,
)
from food_or_trash.adapters.openai_classifier_client import OpenAIClassifierClient
from food_or_trash.adapters.supabase_item_repository import SupabaseItemRepository
from food_or_trash.adapters.unconfigured_client import UnconfiguredClassifierClient
from food_or_trash.adapters.workers_ai_client import HttpxWorkersAIClient
from food_or_trash.config import Settings
from food_or_trash.domain.items import ItemDatabase
from food_or_trash.services.catalog import CatalogService
from food_or_trash.services.checker import FoodCheckService
from food_or_trash.services.classifier import ClassifierService
from food_or_trash.services.items import ItemRepository, load_item_database
from food_or_trash.services.matcher import SearchIndex
from food_or_trash.services.resolver import Resolver

_logger = logging.getLogger(__name__)

_ManagedClassifierClient = (
    OpenAIClassifierClient | HttpxWorkersAIClient | UnconfiguredClassifierClient
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    item_database: ItemDatabase
    resolver: Resolver
    classifier_service: ClassifierService
    food_check_service: FoodCheckService
    catalog_service: CatalogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    item_database = load_item_database(_build_item_repository(resolved_settings))
    search_index = SearchIndex.build(
        item_database, threshold=resolved_settings.fuzzy_threshold
    )
    resolver = Resolver(search_index)
    classifier_client = _build_classifier_client(resolved_settings)
    classifier_service = ClassifierService(classifier_client)
    food_check_service = FoodCheckService(
        resolver=resolver,
        classifier=classifier_service,
        max_query_length=resolved_settings.max_query_length,
    )
    catalog_service = CatalogService(item_database)

    async def close_resources() -> None:
        await classifier_client.close()

    return AppContainer(
        settings=resolved_settings,
        item_database=item_database,
        resolver=resolver,
        classifier_service=classifier_service,
        food_check_service=food_check_service,
        catalog_service=catalog_service,
        close_resources=close_resources,
    )


def _build_item_repository(settings: Settings) -> ItemRepository:
    """Select the item data source from settings."""
    if settings.item_source == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "when ITEM_SOURCE is supabase"
            )
        return SupabaseItemRepository(
            create_client(settings.supabase_url, settings.supabase_service_key)
        )
    return JsonItemRepository(settings.items_dir or DEFAULT_DATA_DIR)


def _build_classifier_client(settings: Settings) -> _ManagedClassifierClient:
    """Create the configured classifier client, or a failing placeholder."""
    if not settings.classifier_configured():
        _logger.warning(
            "No credentials for %s classifier; AI verdicts fall back to trash",
            settings.classifier_provider,
        )
        return UnconfiguredClassifierClient(provider=settings.classifier_provider)
    if settings.classifier_provider == "workers_ai":
        return HttpxWorkersAIClient.create(
            account_id=settings.cloudflare_account_id or "",
            api_key=settings.cloudflare_api_key or "",
            base_url=settings.workers_ai_base_url,
            text_model=settings.workers_ai_text_model,
            vision_model=settings.workers_ai_vision_model,
        )
    return OpenAIClassifierClient.create(
        api_key=settings.openai_api_key or "",
        model=settings.openai_model,
        vision_model=settings.openai_vision_model,
        store=settings.openai_store,
    )

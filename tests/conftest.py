"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from food_or_trash.config import Settings
from food_or_trash.containers import AppContainer
from food_or_trash.domain.items import FoodEntry, ItemDatabase, TrashEntry
from food_or_trash.services.catalog import CatalogService
from food_or_trash.services.checker import FoodCheckService
from food_or_trash.services.classifier import (
    TYPE_SYSTEM_PROMPT,
    ClassifierClient,
    ClassifierError,
    ClassifierService,
)
from food_or_trash.services.matcher import SearchIndex
from food_or_trash.services.resolver import Resolver

DEFAULT_VERDICT_REPLY = "No\n30\n200\nNot in the script, so it's trash."


@dataclass
class FakeClassifierClient(ClassifierClient):
    """Fake classifier client with scripted replies keyed by query.

    Entries in ``failing`` are either a call kind ("type", "verdict", "image")
    or "<kind>:<query>" to fail a single query. Entries in ``crashing`` use
    the "<kind>:<query>" form and raise an unexpected RuntimeError instead.
    """

    type_replies: dict[str, str] = field(default_factory=dict)
    verdict_replies: dict[str, str] = field(default_factory=dict)
    image_reply: str = "It's a grilled salmon."
    failing: set[str] = field(default_factory=set)
    crashing: set[str] = field(default_factory=set)
    delays: dict[str, float] = field(default_factory=dict)
    type_calls: list[str] = field(default_factory=list)
    verdict_calls: list[str] = field(default_factory=list)
    image_calls: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    async def complete(
        self, *, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str:
        query = user_prompt.split('"')[1]
        if system_prompt == TYPE_SYSTEM_PROMPT:
            self.type_calls.append(query)
            await self._settle("type", query)
            return self.type_replies.get(query, '{"type": "whole"}')
        self.verdict_calls.append(query)
        await self._settle("verdict", query)
        return self.verdict_replies.get(query, DEFAULT_VERDICT_REPLY)

    async def describe_image(
        self, *, image_data_url: str, prompt: str, max_tokens: int
    ) -> str:
        self.image_calls.append(image_data_url)
        await self._settle("image", "")
        return self.image_reply

    async def _settle(self, kind: str, query: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(query, 0))
            if kind in self.failing or f"{kind}:{query}" in self.failing:
                raise ClassifierError(f"scripted {kind} failure")
            if f"{kind}:{query}" in self.crashing:
                raise RuntimeError(f"unexpected {kind} crash")
        finally:
            self.in_flight -= 1


def make_database() -> ItemDatabase:
    return ItemDatabase(
        foods=(
            FoodEntry(
                name="apple",
                category="fruit",
                aliases=("apples", "green apple"),
                score=95,
                calories=52,
                fun_fact="An apple's polyphenols sit in the skin.",
            ),
            FoodEntry(
                name="chicken breast",
                category="poultry",
                aliases=("chicken breasts",),
                score=90,
                calories=165,
                fun_fact="Lean protein.",
            ),
            FoodEntry(
                name="chicken",
                category="poultry",
                aliases=("whole chicken",),
                score=88,
                calories=239,
                fun_fact="Roast it whole.",
            ),
            FoodEntry(
                name="salmon",
                category="fish",
                aliases=("wild salmon",),
                score=97,
                calories=208,
                fun_fact="Packed with omega-3s.",
            ),
            FoodEntry(
                name="olive oil",
                category="oil",
                aliases=("extra virgin olive oil", "EVOO"),
                score=90,
                calories=884,
                fun_fact="Cold pressed.",
            ),
            FoodEntry(
                name="butter",
                category="dairy",
                aliases=(),
                score=88,
                calories=717,
                fun_fact="Vitamin K2.",
            ),
            FoodEntry(
                name="spinach",
                category="vegetable",
                aliases=("baby spinach",),
                score=94,
                calories=23,
                fun_fact="Cook it for the iron.",
            ),
        ),
        trash=(
            TrashEntry(
                name="canola oil",
                category="seed oil",
                aliases=("rapeseed oil",),
                score=5,
                calories=884,
                reason="Hexane extracted.",
                swap="olive oil",
            ),
            TrashEntry(
                name="chicken nuggets",
                category="deep fried",
                aliases=("nuggets",),
                score=10,
                calories=296,
                reason="Fried in seed oil.",
            ),
            TrashEntry(
                name="margarine",
                category="seed oil product",
                aliases=("spread",),
                score=6,
                calories=717,
                reason="Hydrogenated seed oil.",
                swap="butter",
            ),
            TrashEntry(
                name="soda",
                category="ultra-processed",
                aliases=("cola", "soft drink"),
                score=2,
                calories=41,
                reason="Liquid sugar.",
            ),
            TrashEntry(
                name="potato chips",
                category="ultra-processed",
                aliases=("crisps",),
                score=10,
                calories=536,
                reason="Soaked in seed oil.",
            ),
        ),
    )


@pytest.fixture
def database() -> ItemDatabase:
    return make_database()


@pytest.fixture
def search_index(database: ItemDatabase) -> SearchIndex:
    return SearchIndex.build(database)


@pytest.fixture
def resolver(search_index: SearchIndex) -> Resolver:
    return Resolver(search_index)


@pytest.fixture
def classifier_client() -> FakeClassifierClient:
    return FakeClassifierClient()


@pytest.fixture
def food_check_service(
    resolver: Resolver, classifier_client: FakeClassifierClient
) -> FoodCheckService:
    return FoodCheckService(
        resolver=resolver, classifier=ClassifierService(classifier_client)
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        classifier_provider="openai",
        openai_api_key=None,
        item_source="json",
    )


@pytest.fixture
def container(
    settings: Settings,
    database: ItemDatabase,
    resolver: Resolver,
    classifier_client: FakeClassifierClient,
) -> AppContainer:
    classifier_service = ClassifierService(classifier_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        item_database=database,
        resolver=resolver,
        classifier_service=classifier_service,
        food_check_service=FoodCheckService(
            resolver=resolver, classifier=classifier_service
        ),
        catalog_service=CatalogService(database),
        close_resources=close_resources,
    )

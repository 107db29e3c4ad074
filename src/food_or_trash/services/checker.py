"""Food-or-trash check pipeline: local lookup, classification, composite scoring."""

import asyncio
import logging
from dataclasses import dataclass

from food_or_trash.domain.classification import CombinationClassification, Ingredient
from food_or_trash.domain.results import (
    FAIL_SAFE_REASON,
    FAIL_SAFE_SCORE,
    INGREDIENT_FAIL_SAFE_REASON,
    AnyResult,
    ComponentResult,
    ImageCheckResult,
    LookupResult,
    fail_safe_result,
)
from food_or_trash.services.classifier import ClassifierError, ClassifierService
from food_or_trash.services.composite import compute_composite_result
from food_or_trash.services.resolver import Resolver

DEFAULT_MAX_QUERY_LENGTH = 200

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedQuery:
    """A trimmed, length-capped query with its lowercase matching key."""

    display: str
    key: str


def normalize_query(
    raw_query: str, max_length: int = DEFAULT_MAX_QUERY_LENGTH
) -> NormalizedQuery:
    """Trim and cap a raw query; the key is lowercased for matching."""
    display = raw_query.strip()[:max_length].strip()
    return NormalizedQuery(display=display, key=display.lower())


@dataclass
class FoodCheckService:
    """Orchestrates local resolution and classifier fallbacks for one query."""

    resolver: Resolver
    classifier: ClassifierService
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH

    async def check(self, raw_query: str) -> AnyResult:
        """Return a verdict for a free-text query; never raises for AI failures."""
        query = normalize_query(raw_query, self.max_query_length)
        if not query.key:
            raise ValueError("Query must not be empty")

        local = self.resolver.resolve(query.key)
        if local is not None:
            _logger.debug("Local hit: query=%s verdict=%s", query.key, local.verdict)
            return local

        try:
            classification = await self.classifier.detect_type(query.display)
        except ClassifierError as exc:
            _logger.warning("Type detection failed for %r: %s", query.display, exc)
            return await self._check_single_item(query.display, FAIL_SAFE_REASON)

        if isinstance(classification, CombinationClassification):
            _logger.info(
                "Combination: query=%s ingredients=%s",
                query.key,
                len(classification.ingredients),
            )
            return await self._check_combination(
                query.display, classification.ingredients
            )
        return await self._check_single_item(query.display, FAIL_SAFE_REASON)

    async def identify(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> ImageCheckResult:
        """Identify the main food in an image and return its verdict."""
        try:
            name = await self.classifier.identify(image_bytes, mime_type)
        except ClassifierError as exc:
            _logger.warning("Image identification failed: %s", exc)
            return _unknown_image("Couldn't identify this image.")
        if not name:
            return _unknown_image("Couldn't identify what's in this image.")

        local = self.resolver.lookup(name)
        if local is not None:
            return _image_result_from_local(name, local)

        try:
            verdict = await self.classifier.check(name)
        except ClassifierError as exc:
            _logger.warning("Verdict failed for identified %r: %s", name, exc)
            return ImageCheckResult(
                name=name,
                is_food=False,
                score=FAIL_SAFE_SCORE,
                reason=(
                    f'Identified as "{name}" but couldn\'t verify. '
                    "When in doubt... trash."
                ),
            )
        return ImageCheckResult(
            name=name,
            is_food=verdict.is_food,
            score=verdict.score,
            calories=verdict.calories,
            reason=verdict.reason,
        )

    async def _check_single_item(self, name: str, fallback_reason: str) -> LookupResult:
        """Ask the classifier for a verdict, degrading to the fail-safe result."""
        try:
            verdict = await self.classifier.check(name)
        except ClassifierError as exc:
            _logger.warning("Verdict failed for %r: %s", name, exc)
            return fail_safe_result(fallback_reason)
        return LookupResult(
            found=verdict.is_food,
            source="ai",
            verdict="food" if verdict.is_food else "trash",
            score=verdict.score,
            calories=verdict.calories,
            ai_reason=verdict.reason,
        )

    async def _check_combination(
        self, query: str, ingredients: list[Ingredient]
    ) -> AnyResult:
        """Resolve each ingredient locally or remotely and score the dish."""
        tagged: list[tuple[int, ComponentResult]] = []
        pending: list[tuple[int, Ingredient]] = []
        for ordinal, ingredient in enumerate(ingredients):
            local = self.resolver.resolve(ingredient.name)
            if local is None:
                pending.append((ordinal, ingredient))
            else:
                tagged.append(
                    (
                        ordinal,
                        ComponentResult(
                            name=ingredient.name,
                            lookup_result=local,
                            weight=ingredient.weight,
                        ),
                    )
                )

        outcomes = await asyncio.gather(
            *(
                self._check_single_item(item.name, INGREDIENT_FAIL_SAFE_REASON)
                for _, item in pending
            ),
            return_exceptions=True,
        )
        for (ordinal, ingredient), outcome in zip(pending, outcomes, strict=True):
            if isinstance(outcome, LookupResult):
                lookup_result = outcome
            elif isinstance(outcome, Exception):
                _logger.error(
                    "Ingredient check crashed for %r: %r", ingredient.name, outcome
                )
                lookup_result = fail_safe_result(INGREDIENT_FAIL_SAFE_REASON)
            else:
                raise outcome
            tagged.append(
                (
                    ordinal,
                    ComponentResult(
                        name=ingredient.name,
                        lookup_result=lookup_result,
                        weight=ingredient.weight,
                    ),
                )
            )
        tagged.sort(key=lambda pair: pair[0])
        return compute_composite_result(query, [component for _, component in tagged])


def _image_result_from_local(name: str, local: LookupResult) -> ImageCheckResult:
    if local.item is not None:
        reason = local.item.fun_fact or f"{name} is real food."
        category = local.item.category
    elif local.trash_item is not None:
        reason = local.trash_item.reason or f"{name} is trash."
        category = local.trash_item.category
    else:
        reason = f"{name} is {local.verdict}."
        category = None
    return ImageCheckResult(
        name=name,
        is_food=local.verdict == "food",
        score=local.score,
        calories=local.calories,
        reason=reason,
        category=category,
    )


def _unknown_image(reason: str) -> ImageCheckResult:
    return ImageCheckResult(
        name="unknown", is_food=False, score=FAIL_SAFE_SCORE, reason=reason
    )

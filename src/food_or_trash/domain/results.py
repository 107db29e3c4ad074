"""Resolution outcomes returned to callers."""

from dataclasses import dataclass, field
from typing import Literal, TypeGuard

from food_or_trash.domain.items import FoodEntry, TrashEntry

Verdict = Literal["food", "trash"]
LookupSource = Literal["local", "ai"]

VERDICT_MIDPOINT = 50
FAIL_SAFE_SCORE = 25
FAIL_SAFE_REASON = "Couldn't verify this one. When in doubt... trash."
INGREDIENT_FAIL_SAFE_REASON = "Could not verify this ingredient."


@dataclass(frozen=True)
class LookupResult:
    """Verdict for a single query or ingredient."""

    found: bool
    source: LookupSource
    verdict: Verdict
    score: int
    calories: int | None = None
    item: FoodEntry | None = None
    trash_item: TrashEntry | None = None
    ai_reason: str | None = None
    is_composite: Literal[False] = field(default=False, init=False)


@dataclass(frozen=True)
class ComponentResult:
    """One weighted ingredient of a decomposed dish."""

    name: str
    lookup_result: LookupResult
    weight: float


@dataclass(frozen=True)
class CompositeResult:
    """Aggregate verdict for a multi-ingredient dish."""

    query: str
    components: tuple[ComponentResult, ...]
    composite_score: int
    composite_verdict: Verdict
    composite_calories: int
    source: Literal["composite"] = field(default="composite", init=False)
    is_composite: Literal[True] = field(default=True, init=False)


AnyResult = LookupResult | CompositeResult


def is_composite_result(result: AnyResult) -> TypeGuard[CompositeResult]:
    """Return True when the result is a composite dish verdict."""
    return result.is_composite is True


def fail_safe_result(reason: str = FAIL_SAFE_REASON) -> LookupResult:
    """Build the guaranteed worst-case verdict used when classification fails."""
    return LookupResult(
        found=False,
        source="ai",
        verdict="trash",
        score=FAIL_SAFE_SCORE,
        ai_reason=reason,
    )


@dataclass(frozen=True)
class ImageCheckResult:
    """Verdict for a food identified from an uploaded image."""

    name: str
    is_food: bool
    score: int
    reason: str
    calories: int | None = None
    category: str | None = None

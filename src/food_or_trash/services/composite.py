"""Weighted aggregation of ingredient verdicts into a dish verdict."""

import math
from collections.abc import Sequence

from food_or_trash.domain.results import (
    VERDICT_MIDPOINT,
    ComponentResult,
    CompositeResult,
)


def compute_composite_result(
    query: str, components: Sequence[ComponentResult]
) -> CompositeResult:
    """Combine weighted components; weights are expected to sum to 1.0."""
    composite_score = _round_half_up(
        sum(
            component.lookup_result.score * component.weight
            for component in components
        )
    )
    composite_calories = _round_half_up(
        sum(
            (component.lookup_result.calories or 0) * component.weight
            for component in components
        )
    )
    return CompositeResult(
        query=query,
        components=tuple(components),
        composite_score=composite_score,
        composite_verdict="food" if composite_score >= VERDICT_MIDPOINT else "trash",
        composite_calories=composite_calories,
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

"""Models for classifier responses."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class Ingredient(BaseModel):
    """Single weighted ingredient of a combination dish."""

    name: str = Field(min_length=1, max_length=100)
    weight: float = Field(ge=0.0, le=1.0)


class WholeClassification(BaseModel):
    """A single whole food eaten on its own."""

    type: Literal["whole"] = "whole"


class ProcessedClassification(BaseModel):
    """A single industrially processed item."""

    type: Literal["processed"] = "processed"


class CombinationClassification(BaseModel):
    """A dish made of several whole foods, decomposed with weights."""

    type: Literal["combination"] = "combination"
    ingredients: list[Ingredient] = Field(min_length=2, max_length=8)


Classification = Annotated[
    WholeClassification | ProcessedClassification | CombinationClassification,
    Field(discriminator="type"),
]


class ClassifierVerdict(BaseModel):
    """Food-or-trash verdict from the classifier."""

    is_food: bool
    score: int = Field(ge=0, le=100)
    calories: int | None = Field(default=None, ge=0, le=2000)
    reason: str

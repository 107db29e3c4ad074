"""Classifier service: type detection, verdicts and image identification."""

import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from food_or_trash.domain.classification import (
    Classification,
    ClassifierVerdict,
    ProcessedClassification,
    WholeClassification,
)

MAX_INGREDIENTS = 8
MAX_INGREDIENT_NAME_LENGTH = 100
MAX_CALORIES = 2000
DEFAULT_FOOD_SCORE = 75
DEFAULT_TRASH_SCORE = 25

TYPE_SYSTEM_PROMPT = """You classify food inputs into exactly one of three categories.

WHOLE: A single whole food or traditional ingredient eaten on its own.
Examples: salmon, avocado, blueberries, bone broth, ghee, dark chocolate 90%, kombucha.

COMBINATION: A dish or meal made by combining multiple whole foods with minimal processing. The kind of thing you'd cook at home from real ingredients.
Examples: grilled salmon with asparagus, steak and eggs, chicken salad (homemade), vegetable stir-fry with olive oil.

PROCESSED: Anything involving industrial processing, seed oils, refined flour, refined sugar, artificial ingredients, deep frying in seed oil, or mass-produced packaged food. If it comes from a fast food chain, a deli counter, a factory, or a freezer aisle, it is processed.
Examples: french fries, chicken nuggets, store-bought lasagne, pizza, kebab, instant ramen, mayonnaise, breakfast cereal, protein bars, any fast food item.

IMPORTANT RULES:
- Deep frying = PROCESSED (always, even if the base ingredient is whole food)
- Fast food / takeaway / deli counter = PROCESSED
- Contains seed oils, refined flour, or refined sugar = PROCESSED
- Restaurant dishes with sauces are usually PROCESSED (commercial sauces use seed oils)
- "Homemade" or "with olive oil" qualifiers can make something COMBINATION
- When in doubt between COMBINATION and PROCESSED, choose PROCESSED

For COMBINATION items, also decompose into ingredients with prominence weights.

Reply with ONLY valid JSON, no markdown fences, in one of these formats:

For WHOLE: {"type": "whole"}
For PROCESSED: {"type": "processed"}
For COMBINATION: {"type": "combination", "ingredients": [{"name": "ingredient", "weight": 0.5}, ...]}

Ingredient rules (COMBINATION only):
- Use simple names a food database would recognize
- Include cooking fats/oils as ingredients (e.g. "olive oil", "butter")
- Weights must sum to 1.0, maximum 8 ingredients
- No explanations, just the JSON"""

VERDICT_SYSTEM_PROMPT = (
    "You are a strict whole-food evaluator. FOOD means: whole, unprocessed foods "
    "that humans evolved to eat: meat, fish, eggs, vegetables, fruits, nuts, seeds, "
    "traditional fats (butter, ghee, tallow, lard, olive oil, coconut oil, avocado "
    "oil). TRASH means: anything containing seed oils (canola, soybean, corn, "
    "sunflower, safflower, cottonseed, grapeseed oil), ultra-processed foods, "
    "artificial ingredients, refined sugars, or industrially produced ingredients. "
    "Reply with exactly four lines:\n"
    "Line 1: Yes (it is real food) or No (it is trash)\n"
    "Line 2: A score from 0 to 100 (0 = pure trash, 100 = pure whole food)\n"
    "Line 3: Estimated calories per 100g (just the number)\n"
    "Line 4: One punchy sentence explaining why.\n"
    "Be opinionated and direct."
)

IDENTIFY_PROMPT = (
    "What is the main food or dish in this image? Reply with ONLY the name "
    '(e.g. "omelette", "grilled salmon", "caesar salad"). '
    "Just the name, nothing else."
)

_JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)
_FIRST_INTEGER = re.compile(r"\d+")
_BARE_INTEGER = re.compile(r"^\d+$")
_NAME_LEAD_IN = re.compile(
    r"^(it('s| is| looks like)|this is|i see|the (main )?(food|dish) is)\s*",
    re.IGNORECASE,
)
_NAME_ARTICLE = re.compile(r"^(a |an |the )", re.IGNORECASE)
_NAME_TRAILING = re.compile(r"[.!,\"]+$")

_logger = logging.getLogger(__name__)
_classification_adapter: TypeAdapter[Classification] = TypeAdapter(Classification)


class ClassifierError(RuntimeError):
    """Raised when the external classifier cannot produce a usable reply."""


class ClassifierClient(Protocol):
    """Interface for the external text and vision model."""

    async def complete(
        self, *, system_prompt: str, user_prompt: str, max_tokens: int
    ) -> str:
        """Return the model's text reply to a system and user prompt."""

    async def describe_image(
        self, *, image_data_url: str, prompt: str, max_tokens: int
    ) -> str:
        """Return the model's text reply about an image."""


@dataclass
class ClassifierService:
    """Service that prompts the classifier and decodes its replies."""

    client: ClassifierClient

    async def detect_type(self, query: str) -> Classification:
        """Classify a query as whole, processed or a weighted combination.

        Transport failures raise ClassifierError; replies that cannot be
        decoded fall back to a whole-food classification.
        """
        text = await self.client.complete(
            system_prompt=TYPE_SYSTEM_PROMPT,
            user_prompt=f'Classify: "{query}"',
            max_tokens=300,
        )
        return decode_classification(extract_json_object(text))

    async def check(self, query: str) -> ClassifierVerdict:
        """Ask the classifier whether a single item is food or trash."""
        text = await self.client.complete(
            system_prompt=VERDICT_SYSTEM_PROMPT,
            user_prompt=f'Is "{query}" real food or trash?',
            max_tokens=100,
        )
        return parse_verdict_text(text)

    async def identify(self, image_bytes: bytes, mime_type: str | None = None) -> str:
        """Return the cleaned name of the main food in an image, or ""."""
        raw = await self.client.describe_image(
            image_data_url=to_data_url(image_bytes, mime_type),
            prompt=IDENTIFY_PROMPT,
            max_tokens=20,
        )
        return clean_identified_name(raw)


def extract_json_object(text: str) -> object | None:
    """Return the first JSON object embedded in a model reply, if any."""
    match = _JSON_BLOCK.search(text)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        _logger.debug("Classifier reply is not valid JSON: %s", text)
        return None


def decode_classification(payload: object) -> Classification:
    """Decode a loosely typed type-detection payload conservatively."""
    if not isinstance(payload, dict):
        return WholeClassification()
    kind = payload.get("type")
    if kind == "processed":
        return ProcessedClassification()
    if kind == "combination":
        ingredients = _sanitize_ingredients(payload.get("ingredients"))
        if len(ingredients) >= 2:
            try:
                return _classification_adapter.validate_python(
                    {"type": "combination", "ingredients": ingredients}
                )
            except ValidationError:
                _logger.debug("Discarding invalid ingredients: %s", ingredients)
    return WholeClassification()


def _sanitize_ingredients(raw: object) -> list[dict[str, object]]:
    """Filter, truncate, clamp and renormalize declared ingredients."""
    if not isinstance(raw, list) or len(raw) < 2:
        return []
    valid: list[tuple[str, float]] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        weight = item.get("weight")
        if not isinstance(name, str) or isinstance(weight, bool):
            continue
        if not isinstance(weight, int | float):
            continue
        cleaned = name.strip().lower()[:MAX_INGREDIENT_NAME_LENGTH]
        if cleaned:
            valid.append((cleaned, float(weight)))
    valid = [(name, max(0.0, min(1.0, weight))) for name, weight in valid]
    valid = valid[:MAX_INGREDIENTS]
    if len(valid) < 2:
        return []
    total = sum(weight for _, weight in valid)
    if total <= 0:
        valid = [(name, 1.0) for name, _ in valid]
        total = float(len(valid))
    return [
        {"name": name, "weight": round(weight / total, 3)} for name, weight in valid
    ]


def parse_verdict_text(text: str) -> ClassifierVerdict:
    """Parse the four-line verdict reply, defaulting anything unparseable."""
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    is_food = bool(lines) and lines[0].lower().startswith("yes")

    score = DEFAULT_FOOD_SCORE if is_food else DEFAULT_TRASH_SCORE
    if len(lines) > 1:
        parsed = _first_integer(lines[1])
        if parsed is not None and 0 <= parsed <= 100:
            score = parsed

    calories = None
    if len(lines) > 2:
        parsed = _first_integer(lines[2])
        if parsed is not None and 0 <= parsed <= MAX_CALORIES:
            calories = parsed

    if len(lines) > 3:
        reason = " ".join(lines[3:])
    elif len(lines) > 2 and not _BARE_INTEGER.match(lines[2]):
        reason = " ".join(lines[2:])
    elif is_food:
        reason = "The AI says this counts as food."
    else:
        reason = "The AI says this is definitely not food."

    return ClassifierVerdict(
        is_food=is_food, score=score, calories=calories, reason=reason
    )


def clean_identified_name(raw: str) -> str:
    """Strip conversational lead-ins and punctuation from a vision reply."""
    name = _NAME_LEAD_IN.sub("", raw.strip())
    name = _NAME_ARTICLE.sub("", name)
    name = _NAME_TRAILING.sub("", name)
    return name.split("\n")[0].strip().lower()


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved_mime = mime_type or _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved_mime};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _first_integer(text: str) -> int | None:
    match = _FIRST_INTEGER.search(text)
    return int(match.group(0)) if match else None

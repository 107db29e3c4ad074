"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from food_or_trash.api.catalog import router as catalog_router
from food_or_trash.api.models import IdentifyRequest, ItemRequest
from food_or_trash.app_logging import configure_logging
from food_or_trash.containers import AppContainer
from food_or_trash.domain.results import (
    FAIL_SAFE_REASON,
    FAIL_SAFE_SCORE,
    AnyResult,
    is_composite_result,
)
from food_or_trash.services.catalog import score_color
from food_or_trash.services.checker import normalize_query
from food_or_trash.services.classifier import ClassifierError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(catalog_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/check")
    async def check(body: ItemRequest, request: Request) -> dict[str, object]:
        """Run the full food-or-trash pipeline for a query."""
        state_container: AppContainer = request.app.state.container
        item = _require_item(body)
        result = await state_container.food_check_service.check(item)
        return _result_payload(result)

    @app.post("/api/classify")
    async def classify(body: ItemRequest, request: Request) -> dict[str, object]:
        """Return the type detection for a query, whole on failure."""
        state_container: AppContainer = request.app.state.container
        query = normalize_query(
            _require_item(body), state_container.settings.max_query_length
        )
        try:
            classification = await state_container.classifier_service.detect_type(
                query.display
            )
        except ClassifierError:
            logger.exception("Type detection failed")
            return {"type": "whole"}
        return classification.model_dump()

    @app.post("/api/verdict")
    async def verdict(body: ItemRequest, request: Request) -> dict[str, object]:
        """Return the classifier verdict for a single item, trash on failure."""
        state_container: AppContainer = request.app.state.container
        query = normalize_query(
            _require_item(body), state_container.settings.max_query_length
        )
        try:
            result = await state_container.classifier_service.check(query.display)
        except ClassifierError:
            logger.exception("Verdict failed")
            return {
                "is_food": False,
                "score": FAIL_SAFE_SCORE,
                "calories": None,
                "reason": FAIL_SAFE_REASON,
            }
        return result.model_dump()

    @app.post("/api/identify")
    async def identify(body: IdentifyRequest, request: Request) -> dict[str, object]:
        """Identify the food in a base64 image and return its verdict."""
        state_container: AppContainer = request.app.state.container
        if not body.image:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Image is required"
            )
        try:
            image_bytes = base64.b64decode(body.image, validate=True)
        except binascii.Error as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Image must be base64 encoded",
            ) from exc
        result = await state_container.food_check_service.identify(
            image_bytes, body.mime_type
        )
        payload = asdict(result)
        payload["color"] = score_color(result.score)
        return payload

    return app


def _require_item(body: ItemRequest) -> str:
    """Return the submitted item or reject the request."""
    if not body.item or not body.item.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Item is required"
        )
    return body.item


def _result_payload(result: AnyResult) -> dict[str, object]:
    """Serialize a lookup or composite result with its colour band."""
    payload = asdict(result)
    if is_composite_result(result):
        payload["color"] = score_color(result.composite_score)
    else:
        payload["color"] = score_color(result.score)
    return payload

"""Tests for the HTTP API."""

import json

from fastapi.testclient import TestClient

from food_or_trash.api.app import create_app
from food_or_trash.domain.results import FAIL_SAFE_REASON


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_check_returns_local_result(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/api/check", json={"item": "Apple"})

    assert response.status_code == 200
    data = response.json()
    assert data["verdict"] == "food"
    assert data["score"] == 95
    assert data["source"] == "local"
    assert data["is_composite"] is False
    assert data["item"]["name"] == "apple"
    assert data["color"] == "#00cc66"


def test_check_returns_composite_result(container, classifier_client) -> None:
    query = "chicken breast with mayonnaise"
    classifier_client.type_replies[query] = json.dumps(
        {
            "type": "combination",
            "ingredients": [
                {"name": "chicken breast", "weight": 0.6},
                {"name": "mayonnaise", "weight": 0.4},
            ],
        }
    )
    classifier_client.verdict_replies["mayonnaise"] = "No\n20\n680\nSeed oils."
    client = TestClient(create_app(container))

    response = client.post("/api/check", json={"item": query})

    data = response.json()
    assert data["is_composite"] is True
    assert data["source"] == "composite"
    assert data["composite_score"] == 62
    assert data["composite_verdict"] == "food"
    assert data["color"] == "#88cc33"
    assert [c["name"] for c in data["components"]] == ["chicken breast", "mayonnaise"]


def test_check_rejects_blank_item(container) -> None:
    client = TestClient(create_app(container))

    assert client.post("/api/check", json={"item": "   "}).status_code == 400
    assert client.post("/api/check", json={}).status_code == 400


def test_check_falls_back_to_trash_when_classifier_fails(
    container, classifier_client
) -> None:
    classifier_client.failing.update({"type", "verdict"})
    client = TestClient(create_app(container))

    data = client.post("/api/check", json={"item": "mystery meat"}).json()

    assert data["verdict"] == "trash"
    assert data["score"] == 25
    assert data["ai_reason"] == FAIL_SAFE_REASON


def test_classify_endpoint(container, classifier_client) -> None:
    classifier_client.type_replies["pizza"] = '{"type": "processed"}'
    client = TestClient(create_app(container))

    assert client.post("/api/classify", json={"item": "pizza"}).json() == {
        "type": "processed"
    }

    classifier_client.failing.add("type")
    assert client.post("/api/classify", json={"item": "pizza"}).json() == {
        "type": "whole"
    }


def test_verdict_endpoint(container, classifier_client) -> None:
    client = TestClient(create_app(container))

    data = client.post("/api/verdict", json={"item": "frozen pizza"}).json()

    assert data == {
        "is_food": False,
        "score": 30,
        "calories": 200,
        "reason": "Not in the script, so it's trash.",
    }

    classifier_client.failing.add("verdict")
    failed = client.post("/api/verdict", json={"item": "frozen pizza"}).json()
    assert failed["is_food"] is False
    assert failed["score"] == 25
    assert failed["reason"] == FAIL_SAFE_REASON


def test_identify_endpoint(container, classifier_client) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/identify", json={"image": "aW1hZ2U=", "mimeType": "image/png"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "grilled salmon"
    assert data["is_food"] is False
    assert data["score"] == 30
    assert data["color"] == "#ff1a1a"
    assert classifier_client.image_calls == ["data:image/png;base64,aW1hZ2U="]


def test_identify_rejects_missing_or_invalid_image(container) -> None:
    client = TestClient(create_app(container))

    assert client.post("/api/identify", json={}).status_code == 400
    invalid = client.post("/api/identify", json={"image": "not base64!"})
    assert invalid.status_code == 400


def test_item_detail_endpoint(container) -> None:
    client = TestClient(create_app(container))

    data = client.get("/api/items/chicken-breast").json()

    assert data["kind"] == "food"
    assert data["item"]["score"] == 90
    assert data["related"] == [{"slug": "chicken", "name": "chicken", "score": 88}]
    assert client.get("/api/items/unicorn").status_code == 404


def test_category_endpoints(container) -> None:
    client = TestClient(create_app(container))

    categories = client.get("/api/categories").json()["categories"]
    listing = client.get("/api/categories/ultra-processed").json()

    assert categories[0] == {
        "category": "fruit",
        "label": "Fruit",
        "food_count": 1,
        "trash_count": 0,
    }
    assert [item["entry"]["name"] for item in listing["items"]] == [
        "potato chips",
        "soda",
    ]
    assert listing["average_score"] == 6
    assert client.get("/api/categories/candy").status_code == 404

"""ASGI entrypoint for the food-or-trash API."""

from food_or_trash.api.app import create_app
from food_or_trash.containers import build_container

app = create_app(build_container())

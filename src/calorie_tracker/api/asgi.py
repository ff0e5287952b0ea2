"""ASGI entrypoint for the calorie tracker app."""

from calorie_tracker.api.app import create_app
from calorie_tracker.containers import build_container

app = create_app(build_container())

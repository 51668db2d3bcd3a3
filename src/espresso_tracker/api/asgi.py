"""ASGI entrypoint for the espresso tracker API."""

from espresso_tracker.api.app import create_app
from espresso_tracker.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the hydrate tracker API."""

from hydrate_tracker.api.app import create_app
from hydrate_tracker.containers import build_container

app = create_app(build_container())

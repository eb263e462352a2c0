"""ASGI entrypoint for the pantry shopping API."""

from pantry_shopping.api.app import create_app
from pantry_shopping.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the picture catalog API."""

from picture_catalog.api.app import create_app
from picture_catalog.containers import build_container

app = create_app(build_container())

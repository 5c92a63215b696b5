"""ASGI entrypoint for the menu personalizer API."""

from menu_personalizer.api.app import create_app
from menu_personalizer.containers import build_container

app = create_app(build_container())

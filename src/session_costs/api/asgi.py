"""ASGI entrypoint for the session cost API."""

from session_costs.api.app import create_app
from session_costs.containers import build_container

app = create_app(build_container())

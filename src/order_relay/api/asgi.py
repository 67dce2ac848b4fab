"""ASGI entrypoint for the order relay API."""

from order_relay.api.app import create_app
from order_relay.containers import build_container

app = create_app(build_container())

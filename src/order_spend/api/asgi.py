"""ASGI entrypoint for the order spend API."""

from order_spend.api.app import create_app
from order_spend.containers import build_container

app = create_app(build_container())

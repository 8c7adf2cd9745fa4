"""ASGI entrypoint for the carbon ledger API."""

from carbon_ledger.api.app import create_app
from carbon_ledger.containers import build_container

app = create_app(build_container())

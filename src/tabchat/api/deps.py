"""FastAPI dependencies."""
from __future__ import annotations

from fastapi import Request

from tabchat.infra.db.store import TabularStore


def get_store(request: Request) -> TabularStore:
    """The process-wide Tabular Store created in the app lifespan."""
    return request.app.state.store

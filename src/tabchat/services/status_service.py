"""Status use-case: what is configured and what is loaded."""
from __future__ import annotations

from tabchat.api.schemas.status import StatusResponse
from tabchat.infra.db.store import TabularStore
from tabchat.llm.protocol import Provider, pick_provider
from tabchat.services.catalog_service import CatalogService


class StatusService:
    def __init__(self, store: TabularStore) -> None:
        self._store = store

    def status(self) -> StatusResponse:
        provider = pick_provider()
        has_database = self._store.data_dir.exists() and bool(
            CatalogService(self._store.data_dir).list_tables()
        )
        tips: list[str] = []
        if provider is Provider.NONE:
            tips.append("Set OPENROUTER_API_KEY or GEMINI_API_KEY to enable AI.")
        if not has_database:
            tips.append(
                "Drop CSV files into the data folder and restart the app to enable local query execution."
            )
        return StatusResponse(
            provider=provider.value,
            has_database=has_database,
            tables=self._store.table_names(),
            tips=tips,
        )

"""Catalog/Preview: read CSV files straight from disk, bypassing the Store."""
from __future__ import annotations

from pathlib import Path

from tabchat.config import settings
from tabchat.domain.exceptions import NotFoundError
from tabchat.domain.models import PreviewResult, TableFile
from tabchat.ingest.csv_reader import read_csv_preview
from tabchat.logging import logger


class CatalogService:
    def __init__(self, data_dir: Path | str | None = None) -> None:
        self._data_dir = Path(data_dir) if data_dir is not None else settings.data_dir

    def list_tables(self) -> list[TableFile]:
        if not self._data_dir.is_dir():
            return []
        return [
            TableFile(name=p.stem, file=p.name)
            for p in sorted(self._data_dir.glob("*.csv"))
        ]

    def get_file(self, table: str) -> Path:
        """Resolve ``<table>.csv`` inside the data directory."""
        root = self._data_dir.resolve()
        path = (root / f"{table}.csv").resolve()
        if path.parent != root or not path.is_file():
            raise NotFoundError("CSV not found")
        return path

    def preview(self, table: str, limit: int | None = None) -> PreviewResult:
        if limit is None:
            limit = settings.PREVIEW_ROW_LIMIT
        try:
            path = self.get_file(table)
        except NotFoundError as exc:
            return PreviewResult(ok=False, error=exc.message)
        try:
            rows = read_csv_preview(path, limit)
        except Exception as exc:
            logger.exception(f"Failed to preview {path.name}")
            return PreviewResult(ok=False, error=str(exc))
        return PreviewResult(ok=True, rows=rows)

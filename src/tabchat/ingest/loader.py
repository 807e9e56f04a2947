"""CSV Ingestor: load every ``*.csv`` in a directory into the Tabular Store.

Idempotent and failure-tolerant. A table that already holds rows is left
alone, and a file that fails to parse or load is logged and skipped so the
remaining files still load.
"""
from __future__ import annotations

from pathlib import Path

from tabchat.domain.exceptions import ConflictError
from tabchat.domain.models import IngestReport
from tabchat.infra.db.store import TabularStore
from tabchat.ingest.csv_reader import read_csv_records, sanitize_name
from tabchat.ingest.derived import apply_derivations
from tabchat.logging import logger


def ingest(store: TabularStore, directory: Path | str | None = None) -> IngestReport:
    data_dir = Path(directory) if directory is not None else store.data_dir
    report = IngestReport()

    if not data_dir.exists():
        logger.warning(f"Data directory {data_dir} not found; creating it empty.")
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception(f"Could not create data directory {data_dir}")
        return report

    claimed: dict[str, str] = {}
    for path in sorted(data_dir.glob("*.csv")):
        table = sanitize_name(path.stem)
        try:
            _claim(claimed, table, path.name)
            _load_file(store, path, table, report)
        except ConflictError as exc:
            logger.warning(exc.message)
            report.conflicts[path.name] = table
        except Exception as exc:
            logger.exception(f"Failed to load CSV {path.name}")
            report.failed[path.name] = str(exc)

    logger.info(
        f"Ingestion finished: {len(report.loaded)} loaded, {len(report.skipped)} already present, "
        f"{len(report.failed)} failed, {len(report.conflicts)} conflicting."
    )
    return report


def _claim(claimed: dict[str, str], table: str, filename: str) -> None:
    owner = claimed.get(table)
    if owner is not None:
        raise ConflictError(
            f"{filename} maps to table [{table}] already claimed by {owner}; skipping it."
        )
    claimed[table] = filename


def _load_file(store: TabularStore, path: Path, table: str, report: IngestReport) -> None:
    records = read_csv_records(path)
    if not records:
        report.empty.append(path.name)
        return

    apply_derivations(table, records)

    source_cols = list(records[0].keys())
    columns = [sanitize_name(c) for c in source_cols]
    store.create_table_if_not_exists(table, columns)

    if store.row_count(table) > 0:
        logger.info(f"Table [{table}] already populated; skipping insert.")
        report.skipped.append(table)
        return

    rows = [
        [None if r.get(c) is None else str(r[c]) for c in source_cols]
        for r in records
    ]
    inserted = store.insert_many(table, columns, rows)
    report.loaded[table] = inserted
    logger.info(f"Loaded {inserted} row(s) from {path.name} into [{table}].")

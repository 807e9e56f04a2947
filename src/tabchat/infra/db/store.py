"""Tabular Store: thin delegation layer over the in-memory SQLite engine.

Every identifier that reaches SQL text from here is bracket-quoted and must
already be sanitized (``[A-Za-z0-9_]+``), so names round-trip through the
engine's identifier rules unchanged.
"""
from __future__ import annotations

import re
import threading
from pathlib import Path
from typing import Any, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from tabchat.infra.db.engine import create_memory_engine

_IDENT_RE = re.compile(r"^[A-Za-z0-9_]+$")


def quote_ident(name: str) -> str:
    if not _IDENT_RE.match(name or ""):
        raise ValueError(f"Identifier {name!r} is not sanitized")
    return f"[{name}]"


class TabularStore:
    """One in-memory database holding one all-TEXT table per ingested CSV."""

    def __init__(self, data_dir: Path, engine: Engine | None = None) -> None:
        self.data_dir = Path(data_dir)
        self._engine = engine or create_memory_engine()
        self._lock = threading.RLock()

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_table_if_not_exists(self, name: str, columns: Sequence[str]) -> None:
        col_defs = ", ".join(f"{quote_ident(c)} TEXT" for c in columns)
        with self._lock, self._engine.begin() as conn:
            conn.exec_driver_sql(f"CREATE TABLE IF NOT EXISTS {quote_ident(name)} ({col_defs})")

    def insert(self, name: str, columns: Sequence[str], values: Sequence[str | None]) -> None:
        self.insert_many(name, columns, [values])

    def insert_many(
        self, name: str, columns: Sequence[str], rows: Sequence[Sequence[str | None]],
    ) -> int:
        if not rows:
            return 0
        col_list = ",".join(quote_ident(c) for c in columns)
        placeholders = ",".join("?" for _ in columns)
        sql = f"INSERT INTO {quote_ident(name)} ({col_list}) VALUES ({placeholders})"
        with self._lock, self._engine.begin() as conn:
            conn.exec_driver_sql(sql, [tuple(r) for r in rows])
        return len(rows)

    def row_count(self, name: str) -> int:
        with self._lock, self._engine.connect() as conn:
            return conn.exec_driver_sql(f"SELECT COUNT(1) FROM {quote_ident(name)}").scalar_one()

    def query(self, sql: str) -> tuple[list[str], list[tuple[Any, ...]]]:
        """Run one statement verbatim; engine errors propagate to the caller."""
        with self._lock, self._engine.connect() as conn:
            result = conn.exec_driver_sql(sql)
            fields = list(result.keys())
            rows = [tuple(r) for r in result.fetchall()]
        return fields, rows

    def table_exists(self, name: str) -> bool:
        with self._lock, self._engine.connect() as conn:
            return _table_exists(conn, name)

    def table_names(self) -> list[str]:
        with self._lock, self._engine.connect() as conn:
            return self._table_names(conn)

    def describe(self) -> dict[str, list[str]]:
        """Map every table to its column names, in declaration order."""
        schema: dict[str, list[str]] = {}
        with self._lock, self._engine.connect() as conn:
            for name in self._table_names(conn):
                info = conn.exec_driver_sql(f"PRAGMA table_info({quote_ident(name)})").fetchall()
                schema[name] = [row[1] for row in info]
        return schema

    def _table_names(self, conn: Connection) -> list[str]:
        rows = conn.execute(text(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )).fetchall()
        return [r[0] for r in rows]

    def dispose(self) -> None:
        self._engine.dispose()


def _table_exists(conn: Connection, table_name: str) -> bool:
    return (
        conn.execute(
            text(
                "SELECT 1 FROM sqlite_master "
                "WHERE type = 'table' AND name = :name LIMIT 1"
            ),
            {"name": table_name},
        ).first()
        is not None
    )

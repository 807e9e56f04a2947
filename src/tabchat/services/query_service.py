"""Query Executor: sanitize, run against the Tabular Store, shape the result.

Never raises for query-processing problems; every failure comes back as a
``QueryResult`` with ``executed=False`` and a ``FailureKind``.
"""
from __future__ import annotations

import math
import re
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from tabchat.config import settings
from tabchat.domain.models import FailureKind, QueryResult
from tabchat.infra.db.store import TabularStore
from tabchat.logging import logger
from tabchat.sql.sanitize import Rejected, sanitize_for_execution

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INT_RE = re.compile(r"^[+-]?\d+$")
_MISSING_COLUMN_RE = re.compile(r"no such column:\s*([\w.\[\]\"`']+)", re.IGNORECASE)

MISSING_DATA_DIR = "Local data directory not found. Add CSV files into the data directory and restart."


def coerce_value(value: Any) -> Any:
    """Turn a string holding a finite decimal number into that number.

    Anything else, including None and non-numeric strings, is returned as-is.
    """
    if not isinstance(value, str):
        return value
    candidate = value.strip()
    if not candidate or not _NUMBER_RE.match(candidate):
        return value
    if _INT_RE.match(candidate):
        return int(candidate)
    number = float(candidate)
    return number if math.isfinite(number) else value


def coerce_row(row: dict[str, Any]) -> dict[str, Any]:
    return {key: coerce_value(val) for key, val in row.items()}


class QueryExecutor:
    def __init__(
        self,
        store: TabularStore,
        *,
        default_limit: int | None = None,
        max_limit: int | None = None,
    ) -> None:
        self._store = store
        self._default_limit = default_limit or settings.DEFAULT_ROW_LIMIT
        self._max_limit = max_limit or settings.MAX_ROW_LIMIT

    def execute(self, raw_statement: str | None, limit: int | None = None) -> QueryResult:
        if not self._store.data_dir.exists():
            return QueryResult.failure(FailureKind.NO_DATA_DIRECTORY, MISSING_DATA_DIR)

        outcome = sanitize_for_execution(
            raw_statement, limit,
            default_limit=self._default_limit, max_limit=self._max_limit,
        )
        if isinstance(outcome, Rejected):
            return QueryResult.failure(FailureKind.STATEMENT_REJECTED, outcome.reason)

        sql = outcome.sql
        try:
            columns, records = self._store.query(sql)
        except SQLAlchemyError as exc:
            kind, message = self._translate_error(exc)
            logger.info(f"Query failed ({kind.value}): {message.splitlines()[0]}")
            return QueryResult.failure(kind, message, sql=sql)

        if not records:
            return QueryResult.success(sql, [], [])

        fields = list(dict.fromkeys(columns))
        rows = [coerce_row(dict(zip(columns, rec))) for rec in records]
        return QueryResult.success(sql, fields, rows)

    def _translate_error(self, exc: SQLAlchemyError) -> tuple[FailureKind, str]:
        raw = str(getattr(exc, "orig", None) or exc)
        lowered = raw.lower()

        if "no such table" in lowered:
            tables = ", ".join(self._store.table_names()) or "(none loaded)"
            return FailureKind.TABLE_NOT_FOUND, f"Table not found ({raw}). Available tables: {tables}"

        if "no such column" in lowered:
            m = _MISSING_COLUMN_RE.search(raw)
            column = m.group(1) if m else "unknown"
            return FailureKind.COLUMN_NOT_FOUND, (
                f'Column "{column}" not found. Common issues:\n'
                '- "order_value" doesn\'t exist - use payments.[payment_value] or '
                "SUM([order_items].[price] + [order_items].[freight_value])\n"
                "- Check that column names use square brackets: [column_name]\n"
                "- Verify the table schema matches your query"
            )

        if any(marker in lowered for marker in ("syntax error", "incomplete input", "unrecognized token")):
            return FailureKind.SYNTAX_ERROR, (
                f"SQL syntax error: {raw}\n"
                "Make sure to use SQLite-compatible syntax and square brackets for identifiers."
            )

        return FailureKind.ENGINE_ERROR, f"Query error: {raw}"

"""Value types shared by the ingestion, sanitizer and query layers."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    NO_DATA_DIRECTORY = "no_data_directory"
    STATEMENT_REJECTED = "statement_rejected"
    TABLE_NOT_FOUND = "table_not_found"
    COLUMN_NOT_FOUND = "column_not_found"
    SYNTAX_ERROR = "syntax_error"
    ENGINE_ERROR = "engine_error"


class QueryResult(BaseModel):
    """Outcome of executing one statement.

    ``executed`` discriminates: on success ``fields``/``rows`` are set (both
    empty for an empty result set); on failure ``error`` and ``kind`` are.
    ``sql`` is the statement actually sent to the engine, if any.
    """

    executed: bool
    sql: str | None = None
    fields: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None
    kind: FailureKind | None = None

    @classmethod
    def success(cls, sql: str, fields: list[str], rows: list[dict[str, Any]]) -> "QueryResult":
        return cls(executed=True, sql=sql, fields=fields, rows=rows)

    @classmethod
    def failure(cls, kind: FailureKind, error: str, sql: str | None = None) -> "QueryResult":
        return cls(executed=False, sql=sql, error=error, kind=kind)


class TableFile(BaseModel):
    name: str
    file: str


class PreviewResult(BaseModel):
    ok: bool
    rows: list[dict[str, Any]] | None = None
    error: str | None = None


class IngestReport(BaseModel):
    loaded: dict[str, int] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)
    empty: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)
    conflicts: dict[str, str] = Field(default_factory=dict)

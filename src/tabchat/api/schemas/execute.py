"""Execute DTOs — pure Pydantic."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from tabchat.domain.models import FailureKind


class ExecuteRequest(BaseModel):
    sql: str = ""
    limit: int | None = None


class ExecuteResponse(BaseModel):
    ok: bool
    sql: str | None = None
    fields: list[str] | None = None
    rows: list[dict[str, Any]] | None = None
    error: str | None = None
    kind: FailureKind | None = None

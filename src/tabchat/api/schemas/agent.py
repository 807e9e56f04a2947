"""Agent DTOs — pure Pydantic."""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class AgentMode(str, Enum):
    INSIGHTS = "insights"
    SQL = "sql"


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class AgentRequest(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    mode: AgentMode = AgentMode.INSIGHTS
    execute: bool = False
    limit: int | None = None


class AgentResponse(BaseModel):
    ok: bool
    mode: AgentMode
    provider: Literal["openrouter", "gemini", "none"]
    text: str | None = None
    sql: str | None = None
    fields: list[str] | None = None
    rows: list[dict[str, Any]] | None = None
    notice: str | None = None

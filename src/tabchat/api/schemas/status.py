"""Status DTOs — pure Pydantic."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class StatusResponse(BaseModel):
    provider: Literal["openrouter", "gemini", "none"]
    has_database: bool
    tables: list[str]
    tips: list[str]

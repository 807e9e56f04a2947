"""CSV catalog DTOs — pure Pydantic."""
from __future__ import annotations

from pydantic import BaseModel

from tabchat.domain.models import TableFile


class FileListResponse(BaseModel):
    files: list[TableFile]

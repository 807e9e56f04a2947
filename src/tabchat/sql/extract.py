"""Pull a SQL statement out of free-form model output.

Matchers run in a fixed order and the first hit wins. Each one is total:
it returns the candidate text or None, never raises.
"""
from __future__ import annotations

import re
from collections.abc import Callable

MAX_FALLBACK_CHARS = 5000
MIN_BARE_LENGTH = 10

_MARKER_RE = re.compile(
    r"^[ \t]*(?:\*\*)?SQL:(?:\*\*)?[ \t]*(.*?)(?:\n[ \t]*\n|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)
_FENCE_RE = re.compile(r"```[ \t]*(sql)?[ \t]*\n(.*?)```", re.IGNORECASE | re.DOTALL)
_SELECT_TOKEN_RE = re.compile(r"\bSELECT\b", re.IGNORECASE)
_BARE_SELECT_RE = re.compile(r"(\bSELECT\b.*?)(?:\n[ \t]*\n|```|SQL:|\Z)", re.IGNORECASE | re.DOTALL)
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def _from_marker(text: str) -> str | None:
    m = _MARKER_RE.search(text)
    if m:
        sql = m.group(1).strip()
        if sql:
            return sql
    return None


def _from_fence(text: str) -> str | None:
    for m in _FENCE_RE.finditer(text):
        body = m.group(2).strip()
        if body and _SELECT_TOKEN_RE.search(body):
            return body
    return None


def _from_bare_select(text: str) -> str | None:
    m = _BARE_SELECT_RE.search(text)
    if m:
        sql = m.group(1).strip()
        if len(sql) > MIN_BARE_LENGTH:
            return sql
    return None


def _from_first_select(text: str) -> str | None:
    m = _SELECT_TOKEN_RE.search(text)
    if m is None:
        return None
    tail = _BLANK_LINE_RE.split(text[m.start():], maxsplit=1)[0]
    sql = tail[:MAX_FALLBACK_CHARS].strip()
    if len(sql) > MIN_BARE_LENGTH:
        return sql
    return None


MATCHERS: tuple[Callable[[str], str | None], ...] = (
    _from_marker,
    _from_fence,
    _from_bare_select,
    _from_first_select,
)


def extract_statement(text: str | None) -> str | None:
    """Return the first plausible SQL statement in *text*, or None."""
    if not text:
        return None
    for matcher in MATCHERS:
        found = matcher(text)
        if found:
            return found
    return None

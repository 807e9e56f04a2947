"""Make untrusted SQL text safe to hand to the engine.

``sanitize_for_execution`` strips formatting artifacts, allows only SELECT
statements, rejects WHERE clauses with no condition, and caps the row count
of statements that carry no LIMIT of their own. An explicit LIMIT is never
rewritten, however large. Trailing comments are removed first so an appended
LIMIT cannot end up inside one.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_LIMIT = 200
MAX_LIMIT = 1000
PREVIEW_CHARS = 50

_FENCE_OPEN_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```\s*$")
_FENCE_RE = re.compile(r"```")
_TRAILING_RE = re.compile(r"[;\s]+$")
_LINE_COMMENT_RE = re.compile(r"--")
_LEADING_NOISE_RE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?\*/)*", re.DOTALL)
_SELECT_RE = re.compile(r"SELECT\b", re.IGNORECASE)
_WHERE_RE = re.compile(
    r"\bWHERE\b\s*(.*?)(?=\bGROUP\s+BY\b|\bORDER\s+BY\b|\bLIMIT\b|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_DANGLING_CONDITION_RE = re.compile(
    r"^(?:(?:\[?\w+\]?\.)?\[?\w+\]?\s*(?:\b(?:AND|OR))?)?\s*$",
    re.IGNORECASE,
)
_LIMIT_RE = re.compile(r"\bLIMIT\s+\d+", re.IGNORECASE)


@dataclass(frozen=True)
class Sanitized:
    sql: str
    ok: bool = True


@dataclass(frozen=True)
class Rejected:
    reason: str
    ok: bool = False


def clamp_limit(limit: int | None, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    if limit is None:
        limit = default
    return max(1, min(maximum, int(limit)))


def _outside_quotes(statement: str, pos: int) -> bool:
    return statement.count("'", 0, pos) % 2 == 0


def _trailing_comment_start(statement: str) -> int | None:
    if statement.endswith("*/"):
        start = statement.rfind("/*")
        if start >= 0 and _outside_quotes(statement, start):
            return start
        return None
    line_start = statement.rfind("\n") + 1
    for m in _LINE_COMMENT_RE.finditer(statement, line_start):
        if _outside_quotes(statement, m.start()):
            return m.start()
    return None


def strip_trailing_noise(statement: str) -> str:
    """Drop trailing ``;``, whitespace and ``--``/``/* */`` comments outside string literals."""
    while True:
        statement = _TRAILING_RE.sub("", statement)
        cut = _trailing_comment_start(statement)
        if cut is None:
            return statement
        statement = statement[:cut]


def strip_formatting(statement: str) -> str:
    """Drop markdown fences (with language tag) and everything trailing the last clause."""
    cleaned = statement.strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    cleaned = _FENCE_RE.sub("", cleaned)
    return strip_trailing_noise(cleaned).strip()


def find_incomplete_where(statement: str) -> str | None:
    """Return the WHERE body when it names a column but states no condition."""
    m = _WHERE_RE.search(statement)
    if m is None:
        return None
    body = m.group(1).strip()
    if _DANGLING_CONDITION_RE.match(body):
        return body
    return None


def has_limit(statement: str) -> bool:
    return _LIMIT_RE.search(statement) is not None


def sanitize_for_execution(
    statement: str | None,
    limit: int | None = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> Sanitized | Rejected:
    cleaned = strip_formatting(statement or "")
    if not cleaned:
        return Rejected("SQL query appears to be empty.")

    body = _LEADING_NOISE_RE.sub("", cleaned, count=1)
    if not _SELECT_RE.match(body):
        return Rejected(
            "Statement rejected: only read statements permitted, the query must start "
            f"with SELECT. Got: {cleaned[:PREVIEW_CHARS]}..."
        )

    fragment = find_incomplete_where(body)
    if fragment is not None:
        return Rejected(
            "Statement rejected: incomplete WHERE clause, the condition is missing. "
            f"Found: WHERE {fragment}"
        )

    if has_limit(body):
        return Sanitized(body)
    n = clamp_limit(limit, default_limit, max_limit)
    return Sanitized(f"{body} LIMIT {n}")

"""Tests for read-only enforcement, WHERE completeness and row-cap injection."""
from __future__ import annotations

import pytest

from tabchat.sql.sanitize import (
    Rejected,
    Sanitized,
    clamp_limit,
    find_incomplete_where,
    sanitize_for_execution,
    strip_formatting,
)


@pytest.mark.parametrize("statement", [
    "DROP TABLE x",
    "DELETE FROM x",
    "UPDATE [orders] SET [amount] = '0'",
    "INSERT INTO x VALUES (1)",
    "PRAGMA table_info(x)",
    "WITH t AS (SELECT 1) SELECT * FROM t",
])
def test_non_select_statements_are_rejected(statement):
    outcome = sanitize_for_execution(statement)
    assert isinstance(outcome, Rejected)
    assert outcome.ok is False
    assert "only read statements permitted" in outcome.reason
    assert statement[:50] in outcome.reason


def test_rejection_quotes_only_first_fifty_characters():
    statement = "DELETE FROM [orders] WHERE " + "x" * 100
    outcome = sanitize_for_execution(statement)
    assert isinstance(outcome, Rejected)
    assert statement[:50] in outcome.reason
    assert statement[:51] not in outcome.reason


def test_empty_statement_is_rejected():
    outcome = sanitize_for_execution("  ;; ")
    assert isinstance(outcome, Rejected)
    assert "empty" in outcome.reason


def test_limit_is_injected_with_default():
    outcome = sanitize_for_execution("SELECT * FROM [orders]")
    assert outcome == Sanitized("SELECT * FROM [orders] LIMIT 200")


@pytest.mark.parametrize("requested, expected", [
    (50, 50),
    (1000, 1000),
    (5000, 1000),
    (0, 1),
    (-3, 1),
])
def test_injected_limit_is_clamped(requested, expected):
    outcome = sanitize_for_execution("SELECT * FROM [orders]", requested)
    assert isinstance(outcome, Sanitized)
    assert outcome.sql == f"SELECT * FROM [orders] LIMIT {expected}"


def test_explicit_limit_is_left_untouched():
    statement = "SELECT * FROM [orders] LIMIT 1000000"
    outcome = sanitize_for_execution(statement, 10)
    assert isinstance(outcome, Sanitized)
    assert outcome.sql == statement


def test_lowercase_limit_counts_as_explicit():
    outcome = sanitize_for_execution("select * from [orders] limit 5")
    assert outcome.sql == "select * from [orders] limit 5"


def test_fences_and_trailing_semicolons_are_stripped():
    outcome = sanitize_for_execution("```sql\nSELECT * FROM [orders];\n```")
    assert outcome == Sanitized("SELECT * FROM [orders] LIMIT 200")


def test_leading_comments_are_skipped():
    statement = "-- top customers\n/* by state */\nSELECT [customer_state] FROM [customers]"
    outcome = sanitize_for_execution(statement)
    assert outcome == Sanitized("SELECT [customer_state] FROM [customers] LIMIT 200")


def test_incomplete_where_is_rejected_and_quoted():
    outcome = sanitize_for_execution("SELECT * FROM t WHERE customer_state")
    assert isinstance(outcome, Rejected)
    assert "incomplete WHERE clause" in outcome.reason
    assert "customer_state" in outcome.reason


def test_complete_where_is_accepted():
    outcome = sanitize_for_execution("SELECT * FROM t WHERE customer_state = 'SP'")
    assert outcome == Sanitized("SELECT * FROM t WHERE customer_state = 'SP' LIMIT 200")


@pytest.mark.parametrize("statement, fragment", [
    ("SELECT * FROM t WHERE [customer_state] AND", "[customer_state] AND"),
    ("SELECT * FROM t WHERE [c].[customer_state] ORDER BY 1", "[c].[customer_state]"),
    ("SELECT * FROM t WHERE state or GROUP BY state", "state or"),
    ("SELECT * FROM t WHERE x LIMIT 5", "x"),
])
def test_dangling_where_variants(statement, fragment):
    assert find_incomplete_where(statement) == fragment


def test_where_with_in_list_is_complete():
    assert find_incomplete_where("SELECT * FROM t WHERE x IN ('a', 'b') ORDER BY x") is None


def test_strip_formatting_handles_language_tag_and_whitespace():
    assert strip_formatting("```SQL\nSELECT 1 ;  \n```\n") == "SELECT 1"


def test_clamp_limit_defaults():
    assert clamp_limit(None) == 200
    assert clamp_limit(None, default=20) == 20


@pytest.mark.parametrize("statement", [
    "SELECT [n] FROM [big] -- all rows",
    "SELECT [n] FROM [big]; -- all rows",
    "SELECT [n] FROM [big] /* everything */",
    "SELECT [n] FROM [big] -- a\n-- b",
    "```sql\nSELECT [n] FROM [big] -- all rows\n```",
])
def test_trailing_comments_do_not_swallow_injected_limit(statement):
    outcome = sanitize_for_execution(statement, 5)
    assert outcome == Sanitized("SELECT [n] FROM [big] LIMIT 5")


def test_comment_markers_inside_string_literals_are_kept():
    statement = "SELECT * FROM t WHERE note = 'a -- b' -- trailing"
    assert strip_formatting(statement) == "SELECT * FROM t WHERE note = 'a -- b'"


def test_comment_only_statement_is_empty():
    outcome = sanitize_for_execution("-- nothing to run")
    assert isinstance(outcome, Rejected)
    assert "empty" in outcome.reason

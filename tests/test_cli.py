"""Tests for the tabchat command line."""
from __future__ import annotations

import json

from typer.testing import CliRunner

from tabchat.cli import app

runner = CliRunner()


def test_tables_lists_csv_files(data_dir, orders_csv):
    result = runner.invoke(app, ["tables", "--data-dir", str(data_dir)])
    assert result.exit_code == 0
    assert "orders\torders.csv" in result.stdout


def test_ingest_reports_loaded_tables(data_dir, orders_csv, write_csv):
    write_csv("broken", "a,b\n1,2\n3,4,5\n")

    result = runner.invoke(app, ["ingest", "--data-dir", str(data_dir)])

    assert result.exit_code == 1
    assert "[orders] 2 row(s)" in result.stdout
    assert "broken.csv" in result.stdout


def test_query_prints_fields_and_rows(data_dir, orders_csv):
    result = runner.invoke(app, ["query", "SELECT * FROM [orders]", "--data-dir", str(data_dir)])

    assert result.exit_code == 0
    assert "-- SELECT * FROM [orders] LIMIT 200" in result.stdout
    payload = json.loads(result.stdout.split("\n", 1)[1])
    assert payload["rows"][0] == {"order_id": "A1", "amount": 10.5}


def test_query_rejection_exits_nonzero(data_dir, orders_csv):
    result = runner.invoke(app, ["query", "DROP TABLE [orders]", "--data-dir", str(data_dir)])
    assert result.exit_code == 1
    assert "statement_rejected" in result.stdout


def test_preview_missing_table(data_dir):
    result = runner.invoke(app, ["preview", "nope", "--data-dir", str(data_dir)])
    assert result.exit_code == 1
    assert "CSV not found" in result.stdout

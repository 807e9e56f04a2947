"""Tests for CSV ingestion into the Tabular Store."""
from __future__ import annotations

from tabchat.infra.db.store import TabularStore
from tabchat.ingest.loader import ingest


def test_ingest_creates_one_table_per_csv(store, orders_csv, write_csv):
    write_csv("customers", "customer_id,customer_state\nc1,SP\n")

    report = ingest(store)

    assert report.loaded == {"customers": 1, "orders": 2}
    assert store.table_names() == ["customers", "orders"]


def test_ingest_is_idempotent(store, orders_csv):
    ingest(store)
    first = store.row_count("orders")

    report = ingest(store)

    assert store.row_count("orders") == first == 2
    assert report.skipped == ["orders"]
    assert report.loaded == {}


def test_table_and_column_names_are_sanitized(store, write_csv):
    write_csv("sales 2024-q1", "order id,unit-price\n1,9.99\n")

    ingest(store)

    assert store.describe() == {"sales_2024_q1": ["order_id", "unit_price"]}


def test_empty_fields_become_null(store, write_csv):
    write_csv("orders", "order_id,amount\nA3,\n")

    ingest(store)

    _, rows = store.query("SELECT [amount] FROM [orders]")
    assert rows == [(None,)]


def test_blank_lines_are_skipped(store, write_csv):
    write_csv("orders", "order_id,amount\n\nA1,1\n\n\nA2,2\n")

    ingest(store)

    assert store.row_count("orders") == 2


def test_header_only_and_empty_files_are_skipped(store, write_csv):
    write_csv("header_only", "a,b\n")
    write_csv("blank", "")

    report = ingest(store)

    assert sorted(report.empty) == ["blank.csv", "header_only.csv"]
    assert store.table_names() == []


def test_malformed_csv_does_not_abort_other_files(store, orders_csv, write_csv):
    write_csv("broken", "a,b\n1,2\n3,4,5\n")

    report = ingest(store)

    assert "broken.csv" in report.failed
    assert report.loaded == {"orders": 2}


def test_missing_directory_is_created_empty(tmp_path):
    missing = tmp_path / "nowhere"
    store = TabularStore(missing)

    report = ingest(store)

    assert missing.is_dir()
    assert report.loaded == {}
    assert store.table_names() == []


def test_colliding_table_names_are_flagged_not_merged(store, write_csv):
    write_csv("a-b", "x\n1\n")
    write_csv("a_b", "x\n2\n3\n")

    report = ingest(store)

    assert report.loaded == {"a_b": 1}
    assert report.conflicts == {"a_b.csv": "a_b"}
    assert store.row_count("a_b") == 1


def test_known_table_gets_derived_columns(store, write_csv):
    write_csv(
        "olist_orders_dataset",
        "order_id,order_purchase_timestamp\no1,02/10/2017 10:56\no2,\n",
    )

    ingest(store)

    columns = store.describe()["olist_orders_dataset"]
    assert columns[-3:] == ["order_purchase_iso", "order_year_month", "order_quarter"]
    _, rows = store.query(
        "SELECT [order_year_month], [order_quarter] FROM [olist_orders_dataset] ORDER BY [order_id]"
    )
    assert rows == [("2017-10", "2017-Q4"), (None, None)]


def test_ingest_explicit_directory_overrides_store_default(tmp_path, store):
    other = tmp_path / "other"
    other.mkdir()
    (other / "items.csv").write_text("id\n1\n", encoding="utf-8")

    report = ingest(store, other)

    assert report.loaded == {"items": 1}


def test_rows_longer_than_header_fail_instead_of_shifting(store, orders_csv, write_csv):
    write_csv("shifted", "order_id,amount\nA1,10.5,EXTRA\nA2,7,EXTRA\n")
    write_csv("widened", "order_id,amount\nA1,10.5,EXTRA\nA2,7\n")

    report = ingest(store)

    assert "shifted.csv" in report.failed
    assert "widened.csv" in report.failed
    assert "shifted" not in store.table_names()
    assert "widened" not in store.table_names()
    assert report.loaded == {"orders": 2}

"""Derived columns for the known Olist tables.

Rules are keyed by sanitized table name. Each rule mutates the records in
place, appending its columns to every record; values it cannot compute are
None, never an exception.
"""
from __future__ import annotations

import re
from collections.abc import Callable

Record = dict[str, "str | None"]

_DAY_FIRST = re.compile(r"^(\d{2})/(\d{2})/(\d{4})(?:[ T](.+))?$")
_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[ T](.+))?$")
_NON_NUMERIC = re.compile(r"[^0-9.-]+")


def _split_timestamp(raw: str | None) -> tuple[str, str, str, str] | None:
    """Return (year, month, day, time) for DD/MM/YYYY or YYYY-MM-DD stamps."""
    ts = (raw or "").strip()
    if len(ts) < 10:
        return None
    m = _DAY_FIRST.match(ts)
    if m:
        day, month, year, time_part = m.groups()
    else:
        m = _ISO.match(ts)
        if not m:
            return None
        year, month, day, time_part = m.groups()
    if not 1 <= int(month) <= 12:
        return None
    return year, month, day, (time_part or "00:00").strip()


def _order_dates(records: list[Record]) -> None:
    for r in records:
        parts = _split_timestamp(r.get("order_purchase_timestamp"))
        if parts is None:
            r["order_purchase_iso"] = None
            r["order_year_month"] = None
            r["order_quarter"] = None
            continue
        year, month, day, time_part = parts
        quarter = (int(month) - 1) // 3 + 1
        r["order_purchase_iso"] = f"{year}-{month}-{day} {time_part}"
        r["order_year_month"] = f"{year}-{month}"
        r["order_quarter"] = f"{year}-Q{quarter}"


def clean_numeric(raw: str | None) -> str | None:
    cleaned = _NON_NUMERIC.sub("", raw or "")
    return cleaned or None


def _item_amounts(records: list[Record]) -> None:
    for r in records:
        r["price_num"] = clean_numeric(r.get("price"))
        r["freight_num"] = clean_numeric(r.get("freight_value"))


DERIVATIONS: dict[str, Callable[[list[Record]], None]] = {
    "olist_orders_dataset": _order_dates,
    "olist_order_items_dataset": _item_amounts,
}


def apply_derivations(table: str, records: list[Record]) -> None:
    rule = DERIVATIONS.get(table)
    if rule is not None:
        rule(records)

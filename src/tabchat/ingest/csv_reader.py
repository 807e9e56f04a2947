"""CSV parsing on top of pandas' quoting-aware reader.

Everything is read as text; no type inference happens here.
"""
from __future__ import annotations

import re
import warnings
from pathlib import Path

import pandas as pd

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_name(value: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", str(value))


def read_csv_frame(path: Path | str) -> pd.DataFrame:
    """First line is the header; blank lines are skipped; every cell is a str.

    A row with more fields than the header raises ``ParserError`` instead of
    shifting the columns or dropping the extra values.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", pd.errors.ParserWarning)
            return pd.read_csv(
                path,
                dtype=str,
                index_col=False,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding="utf-8",
            )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserWarning as exc:
        raise pd.errors.ParserError(f"Row length does not match the header in {Path(path).name}") from exc


def read_csv_records(path: Path | str) -> list[dict[str, str | None]]:
    """Rows as dicts with empty or missing fields mapped to None."""
    df = read_csv_frame(path)
    return [
        {col: (val if isinstance(val, str) and val != "" else None) for col, val in row.items()}
        for row in df.to_dict(orient="records")
    ]


def read_csv_preview(path: Path | str, limit: int) -> list[dict[str, str]]:
    """The first ``limit`` rows as they appear in the file, short rows padded with ""."""
    df = read_csv_frame(path)
    return df.head(max(0, limit)).fillna("").to_dict(orient="records")

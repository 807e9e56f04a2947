"""System prompt assembly. The table list comes from the live Store schema."""
from __future__ import annotations

BASE_PROMPT = """You are an intelligent SQL data assistant connected to a CSV-based analytical database.

When the user asks a question about the data you must:
1. Identify which table(s) are relevant.
2. Write one valid SQLite SELECT statement using the exact table and column names listed below.
3. Give a concise natural language answer describing what the query returns.

SQL rules:
- Use square brackets [] around every table and column name.
- Every column is stored as TEXT. Use CAST([col] AS REAL) or CAST([col] AS INTEGER) for arithmetic.
- Use strftime('%Y-%m', ...) or substr() for date grouping; never date_trunc, INTERVAL or DISTINCT ON.
- Avoid window functions unless absolutely necessary.
- Use explicit JOINs with the correct keys and COALESCE() for NULLs.
- Always complete WHERE clauses: WHERE [column] = 'value', never just WHERE [column].
- Only SELECT statements are executed. Include LIMIT for listings.
"""

OUTPUT_FORMAT = """
IMPORTANT OUTPUT FORMAT:
[Your natural language answer]

SQL: [one complete, executable SELECT statement on its own line, no markdown fences]

[Optional: a visualization suggestion (bar, line, pie or table)]"""

SQL_ONLY = "\nReturn ONLY a valid SQL query (plain text after 'SQL:'), followed optionally by a short explanation."

DERIVED_HINTS = {
    "olist_orders_dataset": (
        "[order_purchase_iso], [order_year_month] and [order_quarter] are precomputed "
        "from [order_purchase_timestamp]; prefer them for time grouping."
    ),
    "olist_order_items_dataset": (
        "[price_num] and [freight_num] hold the cleaned numeric strings of [price] and [freight_value]. "
        "There is no order_value column: use SUM of price plus freight_value, or payments.[payment_value]."
    ),
}


def describe_schema(schema: dict[str, list[str]]) -> str:
    if not schema:
        return "No tables are loaded yet."
    lines = ["Available tables (use EXACT names with square brackets):"]
    for table, columns in schema.items():
        cols = ", ".join(f"[{c}]" for c in columns)
        lines.append(f"- [{table}]: {cols}")
        hint = DERIVED_HINTS.get(table)
        if hint:
            lines.append(f"  Note: {hint}")
    return "\n".join(lines)


def build_system_prompt(schema: dict[str, list[str]], *, sql_only: bool = False) -> str:
    prompt = f"{BASE_PROMPT}\n{describe_schema(schema)}\n{OUTPUT_FORMAT}"
    if sql_only:
        prompt += SQL_ONLY
    return prompt

import json
import os
import sys
from pathlib import Path

import typer

from tabchat.config import settings
from tabchat.logging import logger, get_run_id

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main():
    """
    Tabchat: ask questions of a folder of CSV files.
    """
    pass


def _data_dir(data_dir: Path | None) -> Path:
    return data_dir if data_dir is not None else settings.data_dir


def _load_store(data_dir: Path):
    from tabchat.infra.db.store import TabularStore
    from tabchat.ingest.loader import ingest

    store = TabularStore(data_dir)
    report = ingest(store)
    return store, report


DataDirOption = typer.Option(None, "--data-dir", help="Directory of CSV files (defaults to DATA_DIR)")


@app.command(name="doctor")
def doctor(data_dir: Path | None = DataDirOption):
    """
    Check configuration and data directory health.
    """
    logger.info("Running doctor check...")
    from tabchat.llm.protocol import Provider, pick_provider
    from tabchat.services.catalog_service import CatalogService

    failures: list[str] = []
    passed = 0
    root = _data_dir(data_dir)

    print("\n🩺 Tabchat Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: LLM provider ────────────────────────────────────────────────
    print("\n[Configuration]")
    provider = pick_provider()
    if provider is Provider.NONE:
        print("  LLM provider:        ❌ None")
        failures.append("Set OPENROUTER_API_KEY or GEMINI_API_KEY in .env to enable the agent")
    else:
        print(f"  LLM provider:        ✅ {provider.value}")
        passed += 1
    print(f"  DEFAULT_ROW_LIMIT:   {settings.DEFAULT_ROW_LIMIT}")
    print(f"  MAX_ROW_LIMIT:       {settings.MAX_ROW_LIMIT}")

    # ── Check 3: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    if root.is_dir():
        print(f"  {root}  ✅ Found")
        passed += 1
        if not os.access(root, os.R_OK):
            failures.append(f"{root} is not readable")
    else:
        print(f"  {root}  ❌ Missing")
        failures.append(f"data directory not found at {root} — create it and add CSV files")

    # ── Check 4: CSV files ───────────────────────────────────────────────────
    files = CatalogService(root).list_tables()
    if files:
        print(f"  CSV files:           ✅ {len(files)}")
        passed += 1
    elif root.is_dir():
        print("  CSV files:           ❌ None")
        failures.append(f"no *.csv files in {root}")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    print(f"Result: {passed}/{total} checks passed — all good ✅")
    print()


@app.command("ingest")
def ingest_cmd(data_dir: Path | None = DataDirOption):
    """Load every CSV into a fresh in-memory store and report what happened."""
    _, report = _load_store(_data_dir(data_dir))
    for table, count in report.loaded.items():
        print(f"✅ [{table}] {count} row(s)")
    for name in report.empty:
        print(f"⚪ {name}: no rows")
    for name, table in report.conflicts.items():
        print(f"⚠️  {name}: table [{table}] already claimed")
    for name, error in report.failed.items():
        print(f"❌ {name}: {error}")
    if report.failed:
        raise typer.Exit(code=1)


@app.command("tables")
def tables(data_dir: Path | None = DataDirOption):
    """List CSV files available as tables."""
    from tabchat.services.catalog_service import CatalogService

    files = CatalogService(_data_dir(data_dir)).list_tables()
    if not files:
        print("No CSV files found.")
        return
    for f in files:
        print(f"{f.name}\t{f.file}")


@app.command("preview")
def preview(
    table: str,
    limit: int = typer.Option(10, help="Rows to show"),
    data_dir: Path | None = DataDirOption,
):
    """Show the first rows of a CSV file, uninterpreted."""
    from tabchat.services.catalog_service import CatalogService

    result = CatalogService(_data_dir(data_dir)).preview(table, limit)
    if not result.ok:
        print(f"❌ {result.error}")
        raise typer.Exit(code=1)
    print(json.dumps(result.rows, indent=2, ensure_ascii=False))


@app.command("query")
def query(
    sql: str,
    limit: int | None = typer.Option(None, help="Row cap when the query has no LIMIT"),
    data_dir: Path | None = DataDirOption,
):
    """Ingest the CSVs, then run one SELECT statement against them."""
    from tabchat.services.query_service import QueryExecutor

    store, _ = _load_store(_data_dir(data_dir))
    result = QueryExecutor(store).execute(sql, limit)
    if not result.executed:
        print(f"❌ [{result.kind.value}] {result.error}")
        raise typer.Exit(code=1)
    print(f"-- {result.sql}")
    print(json.dumps({"fields": result.fields, "rows": result.rows}, indent=2, ensure_ascii=False))


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn
    from tabchat.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    app()

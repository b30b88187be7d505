import os
import sys
import typer
from pathlib import Path
from aiusage.config import settings
from aiusage.logging import logger

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    AI usage ingestion CLI.
    """
    pass

@app.command(name="doctor")
def doctor():
    """
    Check configuration and data directory health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 AI Usage Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    passed += 1

    # ── Check 2: Settings ────────────────────────────────────────────────────
    print("\n[Configuration]")
    print(f"  DATABASE_URL:           {settings.database_url}")
    print(f"  INGEST_MAX_WORKERS:     {settings.INGEST_MAX_WORKERS}")
    print(f"  JOB_TIMEOUT_SECONDS:    {settings.JOB_TIMEOUT_SECONDS:g}")
    print(f"  PERSIST_MAX_ATTEMPTS:   {settings.PERSIST_MAX_ATTEMPTS}")
    passed += 1

    # ── Check 3: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.is_dir() and os.access(data_dir, os.W_OK):
        print(f"  {data_dir}/   ✅ Found and writable: {data_dir.absolute()}")
        passed += 1
    elif data_dir.is_dir():
        print(f"  {data_dir}/   ❌ Not writable: {data_dir.absolute()}")
        failures.append(f"{data_dir} is not writable: uploads and the SQLite DB cannot be created")
    else:
        print(f"  {data_dir}/   ❌ Missing: {data_dir.absolute()}")
        failures.append(f"{data_dir} not found, run `mkdir {data_dir}`")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Create the database tables."""
    from aiusage.db import init_db
    try:
        init_db()
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


ingest_app = typer.Typer(help="Usage file ingestion.")
app.add_typer(ingest_app, name="ingest")


def _print_snapshot(snapshot) -> None:
    print(f"Request:    {snapshot.request_id}")
    print(f"Status:     {snapshot.status.value}")
    print(f"Submitted:  {snapshot.submitted_at}")
    print(f"Completed:  {snapshot.completed_at or '-'}")
    print(f"Records:    {snapshot.total_records} total, "
          f"{snapshot.successful_records} ok, {snapshot.failed_records} failed")
    if snapshot.error_message:
        print(f"Errors:     {snapshot.error_message}")


@ingest_app.command("run")
def ingest_run(
    path: Path = typer.Argument(..., help="CSV file to ingest"),
    user: str | None = typer.Option(None, "--user", help="Submitting user reference"),
):
    """Submit a file and process it in the foreground."""
    from aiusage.db import init_db
    from aiusage.infra.db.uow import UnitOfWork
    from aiusage.ingest.job import IngestionJobRunner
    from aiusage.services.ingest_service import IngestService
    from aiusage.services.status_service import StatusService

    init_db()
    with UnitOfWork() as uow:
        accepted = IngestService(uow).submit_path(str(path), submitted_by=user)
    IngestionJobRunner().run(accepted.request_id)
    with UnitOfWork() as uow:
        snapshot = StatusService(uow).get_status(accepted.request_id)
    _print_snapshot(snapshot)
    if snapshot.status.value == "FAILED":
        raise typer.Exit(code=1)


@ingest_app.command("status")
def ingest_status(request_id: str):
    """Show the stored status of an ingestion request."""
    from aiusage.domain.exceptions import NotFoundError
    from aiusage.infra.db.uow import UnitOfWork
    from aiusage.services.status_service import StatusService

    try:
        with UnitOfWork() as uow:
            snapshot = StatusService(uow).get_status(request_id)
    except NotFoundError as e:
        print(f"❌ {e.message}")
        raise typer.Exit(code=1)
    _print_snapshot(snapshot)

if __name__ == "__main__":
    app()

"""Re-export the singleton engine from aiusage.db and register SQLite pragmas."""
from sqlalchemy import event
from aiusage.db import engine          # singleton; created once at aiusage.db import
import aiusage.models  # noqa: F401   # registers the ingestion_job and usage_record mappers


def _set_wal_mode(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL")
    cur.execute("PRAGMA synchronous=NORMAL")
    cur.execute("PRAGMA busy_timeout=5000")
    cur.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", _set_wal_mode)

__all__ = ["engine"]

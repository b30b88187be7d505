"""Database engine singleton and table bootstrap."""
from __future__ import annotations
from sqlmodel import SQLModel, create_engine
from aiusage.config import settings

DATA_DIR = settings.data_dir


def _make_engine():
    url = settings.database_url
    connect_args = {}
    if url.startswith("sqlite"):
        # Ingestion jobs write from worker threads.
        connect_args["check_same_thread"] = False
        if settings.DATABASE_URL is None:
            DATA_DIR.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=False, connect_args=connect_args)


engine = _make_engine()


def init_db() -> None:
    import aiusage.models  # noqa: F401   # registers table mappers
    SQLModel.metadata.create_all(engine)

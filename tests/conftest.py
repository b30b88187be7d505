"""Shared test fixtures.

  use_test_engine  redirects UoW + infra layer to a temp-file SQLite DB.
  client           FastAPI TestClient wired to the test engine.
  write_csv        writes a CSV file under tmp_path and returns its path.
"""
import os
import tempfile
import pytest
from sqlmodel import SQLModel, create_engine


def pytest_configure(config):
    """Point DATA_DIR at a throwaway directory before aiusage is imported.

    aiusage.db creates DATA_DIR when its engine is built at import time.
    """
    os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="aiusage-test-"))


@pytest.fixture
def use_test_engine(tmp_path, monkeypatch):
    """Monkeypatch engine references to an isolated temp-file SQLite DB.

    Uses a file (not :memory:) so worker threads share the same database.
    """
    db_path = tmp_path / "test_aiusage.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False},
    )

    import aiusage.models  # noqa: F401  register all ORM mappers
    SQLModel.metadata.create_all(test_engine)

    from aiusage.config import settings
    monkeypatch.setattr("aiusage.db.engine", test_engine)
    monkeypatch.setattr("aiusage.infra.db.engine.engine", test_engine)
    monkeypatch.setattr("aiusage.infra.db.uow.engine", test_engine)
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path / "data")

    yield test_engine

    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def client(use_test_engine):
    """FastAPI TestClient backed by the isolated test engine."""
    from fastapi.testclient import TestClient
    from aiusage.api.app import create_app

    app = create_app(max_workers=2)
    with TestClient(app) as c:
        yield c


HEADER = "email,promptCount,businessUnit,account,vertical"


@pytest.fixture
def write_csv(tmp_path):
    def _write(*lines: str, name: str = "usage.csv") -> str:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)
    return _write

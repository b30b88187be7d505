"""Application settings, read from the environment and an optional .env file."""
from __future__ import annotations
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATA_DIR: Path = Path("data")
    DATABASE_URL: str | None = None

    # Ingestion worker pool and per-job bounds
    INGEST_MAX_WORKERS: int = Field(default=4, ge=1)
    JOB_TIMEOUT_SECONDS: float = Field(default=300.0, gt=0)
    PERSIST_MAX_ATTEMPTS: int = Field(default=3, ge=1)
    PERSIST_RETRY_BACKOFF_SECONDS: float = Field(default=0.5, ge=0)

    # Bounds on the error summary stored with a job
    ERROR_SUMMARY_MAX_ROWS: int = Field(default=5, ge=1)
    ERROR_SUMMARY_MAX_CHARS: int = Field(default=1000, ge=80)

    LOG_LEVEL: str = "INFO"

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def uploads_dir(self) -> Path:
        return self.DATA_DIR / "uploads"

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.DATA_DIR / 'aiusage.db'}"


settings = Settings()

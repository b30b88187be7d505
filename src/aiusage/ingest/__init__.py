"""Asynchronous usage-file ingestion."""

from aiusage.ingest.job import IngestionJobRunner
from aiusage.ingest.pool import IngestionWorkerPool

__all__ = ["IngestionJobRunner", "IngestionWorkerPool"]

"""ORM table models. Importing this package registers every mapper."""
from aiusage.models.ingest import IngestionJob, IngestStatus
from aiusage.models.usage import UsageRecord

__all__ = ["IngestionJob", "IngestStatus", "UsageRecord"]

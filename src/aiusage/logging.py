"""Process-wide logger with the active ingestion request id on every record.

Worker threads call ``bind_request_id`` when they pick up a job so log lines
emitted anywhere below the job carry its id.
"""
from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

from aiusage.config import settings

_request_id: ContextVar[str] = ContextVar("aiusage_request_id", default="-")


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> None:
    _request_id.set(request_id)


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def _build_logger() -> logging.Logger:
    log = logging.getLogger("aiusage")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
        ))
        handler.addFilter(_RequestIdFilter())
        log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    return log


logger = _build_logger()

__all__ = ["logger", "get_request_id", "bind_request_id"]

"""Typed HTTP client for the ingestion API.

Only imports from ``aiusage.api.schemas``; never ORM or DB modules.
"""
from __future__ import annotations

import time
from pathlib import Path

import httpx

from aiusage.api.schemas.ingest import StatusSnapshot, SubmissionResponse
from aiusage.api.schemas.usage import UsageList


_DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


class AIUsageClient:
    """One method per backend endpoint.  All return pure Pydantic DTOs.

    Pass ``http`` to reuse an existing ``httpx.Client`` (e.g. a FastAPI
    ``TestClient``); otherwise one is created for ``base_url``.
    """

    def __init__(self, base_url: str = _DEFAULT_BASE_URL, http: httpx.Client | None = None) -> None:
        self._client = http or httpx.Client(base_url=base_url, timeout=30.0)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        raise APIError(resp.status_code, str(detail))

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def submit_path(self, file_path: str, submitted_by: str | None = None) -> SubmissionResponse:
        resp = self._client.post(
            "/ai-usage/upload/path",
            json={"file_path": file_path, "submitted_by": submitted_by},
        )
        self._raise_for_status(resp)
        return SubmissionResponse.model_validate(resp.json())

    def upload_file(self, path: str | Path, submitted_by: str | None = None) -> SubmissionResponse:
        path = Path(path)
        data = {"submitted_by": submitted_by} if submitted_by else None
        with path.open("rb") as fh:
            resp = self._client.post(
                "/ai-usage/upload/file",
                files={"file": (path.name, fh, "text/csv")},
                data=data,
            )
        self._raise_for_status(resp)
        return SubmissionResponse.model_validate(resp.json())

    def get_status(self, request_id: str) -> StatusSnapshot:
        resp = self._client.get(f"/ai-usage/{request_id}/status")
        self._raise_for_status(resp)
        return StatusSnapshot.model_validate(resp.json())

    def wait_for_terminal(
        self, request_id: str, *, timeout: float = 60.0, interval: float = 0.5,
    ) -> StatusSnapshot:
        """Poll the status endpoint until the job is terminal or *timeout* elapses."""
        deadline = time.monotonic() + timeout
        while True:
            snapshot = self.get_status(request_id)
            if snapshot.is_terminal:
                return snapshot
            if time.monotonic() >= deadline:
                raise TimeoutError(
                    f"Request {request_id} still {snapshot.status.value} after {timeout:g}s"
                )
            time.sleep(interval)

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    def latest_usage(self, email: str) -> UsageList:
        resp = self._client.get("/ai-usage/latest", params={"email": email})
        self._raise_for_status(resp)
        return UsageList.model_validate(resp.json())

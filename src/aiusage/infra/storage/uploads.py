"""Filesystem storage for uploaded usage files."""
from __future__ import annotations
import re
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Strip any directory part and replace characters unsafe on common filesystems."""
    name = Path(filename.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", name).strip("._")
    return cleaned or "upload.csv"


def save_upload(uploads_dir: Path, request_id: str, filename: str, content: bytes) -> Path:
    uploads_dir.mkdir(parents=True, exist_ok=True)
    target = uploads_dir / f"{request_id}_{sanitize_filename(filename)}"
    target.write_bytes(content)
    return target.resolve()

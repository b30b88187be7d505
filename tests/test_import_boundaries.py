"""
Import boundary guards.

Rules:
- Service modules must not import fastapi (HTTP concerns stay in routers).
- Domain modules must not import fastapi, sqlmodel or sqlalchemy, except the
  state machine, which shares the IngestStatus enum with the ORM model.
- The HTTP client must never import ORM/DB modules.
"""

import ast
from collections.abc import Callable
from pathlib import Path

REPO_ROOT = Path(__file__).parent.parent
PKG_ROOT = REPO_ROOT / "src" / "aiusage"

ORM_PREFIXES = (
    "sqlmodel",
    "sqlalchemy",
    "aiusage.models",
    "aiusage.db",
    "aiusage.infra",
    "aiusage.services",
)

# status.py imports IngestStatus from aiusage.models.ingest on purpose.
DOMAIN_ALLOWLIST: set[str] = {"src/aiusage/domain/status.py"}


def _file_imports_any(path: Path, is_banned: Callable[[str], bool]) -> bool:
    """Parse *path* with AST and return True if any import matches *is_banned*."""
    source = path.read_text(encoding="utf-8")
    tree = ast.parse(source, filename=str(path))

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if is_banned(alias.name):
                    return True
        elif isinstance(node, ast.ImportFrom):
            if is_banned(node.module or ""):
                return True

    return False


def _repo_relative(path: Path) -> str:
    """Return a POSIX-style path relative to the repo root."""
    return path.relative_to(REPO_ROOT).as_posix()


def test_service_import_boundaries() -> None:
    """Service files must not import from fastapi."""
    _is_fastapi = lambda m: m.startswith("fastapi")  # noqa: E731
    violations = [
        _repo_relative(py_file)
        for py_file in sorted((PKG_ROOT / "services").rglob("*.py"))
        if _file_imports_any(py_file, _is_fastapi)
    ]
    assert not violations, (
        "Service files must not import fastapi:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_domain_import_boundaries() -> None:
    _is_banned = lambda m: m.startswith(("fastapi",) + ORM_PREFIXES)  # noqa: E731
    violations = [
        _repo_relative(py_file)
        for py_file in sorted((PKG_ROOT / "domain").rglob("*.py"))
        if _repo_relative(py_file) not in DOMAIN_ALLOWLIST
        and _file_imports_any(py_file, _is_banned)
    ]
    assert not violations, (
        "Domain files must stay framework-free:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_client_import_boundaries() -> None:
    _is_orm = lambda m: m.startswith(ORM_PREFIXES)  # noqa: E731
    assert not _file_imports_any(PKG_ROOT / "client.py", _is_orm)

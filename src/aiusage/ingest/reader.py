"""CSV source reading. The first row is the header; each later row is one record."""
from __future__ import annotations

import csv
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from aiusage.domain.exceptions import SourceFileError

_READ_ERRORS = (csv.Error, UnicodeDecodeError, OSError)


@contextmanager
def open_rows(path: str | Path) -> Iterator[Iterator[tuple[int, dict[str, str]]]]:
    """Open *path* and yield an iterator of ``(row_index, {column: raw value})``.

    Raises ``SourceFileError`` if the file cannot be opened, the header is
    missing or blank, or reading fails part-way through. Row indexes start at
    1 for the first data row; blank lines are skipped and not counted.
    """
    try:
        fh = open(path, newline="", encoding="utf-8-sig")
    except OSError as exc:
        raise SourceFileError(f"Unable to open source file {path}: {exc.strerror or exc}") from exc

    with fh:
        reader = csv.reader(fh)
        try:
            header = next(reader, None)
        except _READ_ERRORS as exc:
            raise SourceFileError(f"Unable to parse header of {path}: {exc}") from exc
        if header is None:
            raise SourceFileError("Source file is empty.")
        columns = [name.strip() for name in header]
        if not any(columns):
            raise SourceFileError("Source file header is blank.")
        yield _iter_records(reader, columns, path)


def _iter_records(reader, columns: list[str], path) -> Iterator[tuple[int, dict[str, str]]]:
    index = 0
    try:
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            index += 1
            # cells beyond the header are dropped; short rows simply lack those columns
            yield index, {name: value for name, value in zip(columns, cells) if name}
    except _READ_ERRORS as exc:
        raise SourceFileError(f"Error reading {path} after row {index}: {exc}") from exc

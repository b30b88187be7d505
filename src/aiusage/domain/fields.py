"""Registry of recognised CSV columns and the setters they drive.

Column lookup is case-insensitive. Unknown columns resolve to ``None`` and
are ignored by callers; they never fail a row.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from types import MappingProxyType

from aiusage.domain.exceptions import FieldApplyError

_INTEGER_RE = re.compile(r"[+-]?\d+")

# Same ceiling as a signed 32-bit column; wider values fail the row.
MAX_PROMPT_COUNT = 2**31 - 1
_MAX_PROMPT_DIGITS = len(str(MAX_PROMPT_COUNT))


@dataclass(slots=True)
class UsageDraft:
    """Mutable working copy of one row while its columns are applied."""

    email: str | None = None
    prompt_count: int | None = None
    business_unit: str | None = None
    account: str | None = None
    vertical: str | None = None


@dataclass(frozen=True, slots=True)
class UsageRecordData:
    """A fully populated, validated usage row."""

    email: str
    prompt_count: int
    business_unit: str
    account: str
    vertical: str


@dataclass(frozen=True, slots=True)
class FieldMapping:
    name: str
    attribute: str
    setter: Callable[[UsageDraft, str], None]

    def apply(self, draft: UsageDraft, raw_value: str) -> None:
        self.setter(draft, raw_value)

    def is_set(self, draft: UsageDraft) -> bool:
        return getattr(draft, self.attribute) is not None


def _text_setter(name: str, attribute: str) -> Callable[[UsageDraft, str], None]:
    def _set(draft: UsageDraft, raw_value: str) -> None:
        value = raw_value.strip()
        if not value:
            raise FieldApplyError(name, raw_value, "must not be empty")
        setattr(draft, attribute, value)
    return _set


def _set_prompt_count(draft: UsageDraft, raw_value: str) -> None:
    value = raw_value.strip()
    if not _INTEGER_RE.fullmatch(value):
        raise FieldApplyError("promptCount", raw_value, f"invalid integer {raw_value!r}")
    if value.startswith("-"):
        raise FieldApplyError("promptCount", raw_value, "must be >= 0")
    if len(value.lstrip("+").lstrip("0")) > _MAX_PROMPT_DIGITS:
        raise FieldApplyError("promptCount", raw_value, "out of range")
    count = int(value)
    if count > MAX_PROMPT_COUNT:
        raise FieldApplyError("promptCount", raw_value, "out of range")
    draft.prompt_count = count


def _build_registry() -> Mapping[str, FieldMapping]:
    mappings = (
        FieldMapping("email", "email", _text_setter("email", "email")),
        FieldMapping("promptCount", "prompt_count", _set_prompt_count),
        FieldMapping("businessUnit", "business_unit", _text_setter("businessUnit", "business_unit")),
        FieldMapping("account", "account", _text_setter("account", "account")),
        FieldMapping("vertical", "vertical", _text_setter("vertical", "vertical")),
    )
    return MappingProxyType({m.name.lower(): m for m in mappings})


FIELD_REGISTRY: Mapping[str, FieldMapping] = _build_registry()

# Header order used in error messages and exports.
REQUIRED_FIELDS: tuple[str, ...] = tuple(m.name for m in FIELD_REGISTRY.values())


def resolve(
    column_name: str,
    registry: Mapping[str, FieldMapping] = FIELD_REGISTRY,
) -> FieldMapping | None:
    return registry.get(column_name.strip().lower())


def freeze(draft: UsageDraft) -> UsageRecordData:
    """Convert a draft whose every field is set into an immutable record."""
    values = {f.name: getattr(draft, f.name) for f in fields(draft)}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise ValueError(f"draft is incomplete: {', '.join(missing)}")
    return UsageRecordData(**values)

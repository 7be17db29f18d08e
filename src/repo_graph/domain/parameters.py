"""Typed extraction of query parameters.

The query engine hands the adapter an untyped ``name -> value`` mapping.
Each extractor returns the typed value, or ``None`` when the name is missing
or bound to null.  A value of any other type means the engine and the adapter
disagree on the schema and raises :class:`SchemaMismatchError`.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from repo_graph.domain.exceptions import SchemaMismatchError

_DATETIME = TypeAdapter(datetime)

# Full date, full time and an explicit offset are all required.
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


def _lookup(params: Mapping[str, Any], name: str) -> Any:
    return params.get(name) if params else None


def _mismatch(name: str, expected: str, value: Any) -> SchemaMismatchError:
    return SchemaMismatchError(
        f"Parameter '{name}' must be {expected}, got {type(value).__name__}: {value!r}"
    )


def _not_rfc3339(name: str, value: str) -> SchemaMismatchError:
    return SchemaMismatchError(f"Parameter '{name}' is not an RFC 3339 timestamp: {value!r}")


def extract_string(params: Mapping[str, Any], name: str) -> str | None:
    value = _lookup(params, name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _mismatch(name, "a string", value)
    return value


def extract_bool(params: Mapping[str, Any], name: str) -> bool | None:
    value = _lookup(params, name)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise _mismatch(name, "a boolean", value)
    return value


def extract_datetime(params: Mapping[str, Any], name: str) -> datetime | None:
    """Return a timezone-aware timestamp.

    Accepts either a ``datetime`` or an RFC 3339 string such as
    ``2024-05-01T12:00:00Z``.  Naive values are taken to be UTC.
    """
    value = _lookup(params, name)
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        if not _RFC3339_RE.match(value):
            raise _not_rfc3339(name, value)
        try:
            parsed = _DATETIME.validate_python(value)
        except ValidationError as exc:
            raise _not_rfc3339(name, value) from exc
    else:
        raise _mismatch(name, "a timestamp", value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render *value* as an RFC 3339 UTC string (``...Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

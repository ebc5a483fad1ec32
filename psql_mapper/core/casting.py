"""Value Casting — convert textual request values to typed values per ColumnKind.

Invariants:
    - cast_value never touches the database; it only parses text
    - Every ColumnKind has exactly one branch; OTHER passes text through unchanged
      (the statement casts it to the declared type in SQL)
    - Failure always raises InvalidValueError naming the parameter and declared type

Design Decisions:
    - Boolean literals follow PostgreSQL's accepted spellings
    - TIMESTAMP drops a supplied offset and TIMESTAMPTZ assumes UTC for naive input,
      matching how PostgreSQL casts the same literals
"""

import json
import re
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from psql_mapper.core.domain_types import ColumnKind, ColumnMapping
from psql_mapper.core.errors import InvalidValueError

_INTEGER = re.compile(r"[+-]?\d+")
_TRUE = frozenset({"t", "true", "y", "yes", "on", "1"})
_FALSE = frozenset({"f", "false", "n", "no", "off", "0"})


def _to_integer(raw: str) -> int:
    raw = raw.strip()
    if not _INTEGER.fullmatch(raw):
        raise ValueError(raw)
    return int(raw)


def _to_numeric(raw: str) -> Decimal:
    try:
        return Decimal(raw.strip())
    except InvalidOperation as e:
        raise ValueError(raw) from e


def _to_boolean(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(raw)


def _to_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(raw.strip()).replace(tzinfo=None)


def _to_timestamptz(raw: str) -> datetime:
    value = datetime.fromisoformat(raw.strip())
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


_CASTS = {
    ColumnKind.TEXT: lambda raw: raw,
    ColumnKind.INTEGER: _to_integer,
    ColumnKind.NUMERIC: _to_numeric,
    ColumnKind.FLOAT: lambda raw: float(raw.strip()),
    ColumnKind.BOOLEAN: _to_boolean,
    ColumnKind.TIMESTAMP: _to_timestamp,
    ColumnKind.TIMESTAMPTZ: _to_timestamptz,
    ColumnKind.DATE: lambda raw: date.fromisoformat(raw.strip()),
    ColumnKind.TIME: lambda raw: time.fromisoformat(raw.strip()),
    ColumnKind.UUID: lambda raw: uuid.UUID(raw.strip()),
    ColumnKind.JSON: json.loads,
    ColumnKind.OTHER: lambda raw: raw,
}


def cast_value(mapping: ColumnMapping, raw: str) -> Any:
    """Cast a submitted value to the Python type matching the column's declared type."""
    try:
        return _CASTS[mapping.kind](raw)
    except (ValueError, TypeError) as e:
        raise InvalidValueError(mapping.parameter, mapping.column_type) from e

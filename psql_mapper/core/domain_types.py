"""Domain Types — immutable metadata records that drive every CRUD operation.

Invariants:
    - ColumnMapping, PathMapping, Behavior and Registry are frozen; nothing mutates them
      after startup
    - At most one ColumnMapping per Behavior has is_primary=True
    - Registry.routes holds the first Behavior for each path, in registry order
    - ColumnKind is derived from the declared type through one explicit table;
      unknown declared types are ColumnKind.OTHER

Design Decisions:
    - Frozen dataclasses over dicts: a Registry can be shared across concurrent
      requests without locking
    - str Enum for ColumnKind: logs and test assertions read as plain strings
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class ColumnKind(str, Enum):
    """Tagged value variant for a column, derived from its declared type."""
    TEXT = "text"
    INTEGER = "integer"
    NUMERIC = "numeric"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"
    JSON = "json"
    OTHER = "other"


# Keys are information_schema.columns.data_type values (lower-cased).
_KIND_BY_DECLARED_TYPE: dict[str, ColumnKind] = {
    "text": ColumnKind.TEXT,
    "character varying": ColumnKind.TEXT,
    "varchar": ColumnKind.TEXT,
    "character": ColumnKind.TEXT,
    "char": ColumnKind.TEXT,
    "name": ColumnKind.TEXT,
    "citext": ColumnKind.TEXT,
    "smallint": ColumnKind.INTEGER,
    "integer": ColumnKind.INTEGER,
    "bigint": ColumnKind.INTEGER,
    "smallserial": ColumnKind.INTEGER,
    "serial": ColumnKind.INTEGER,
    "bigserial": ColumnKind.INTEGER,
    "numeric": ColumnKind.NUMERIC,
    "decimal": ColumnKind.NUMERIC,
    "real": ColumnKind.FLOAT,
    "double precision": ColumnKind.FLOAT,
    "boolean": ColumnKind.BOOLEAN,
    "timestamp without time zone": ColumnKind.TIMESTAMP,
    "timestamp": ColumnKind.TIMESTAMP,
    "timestamp with time zone": ColumnKind.TIMESTAMPTZ,
    "timestamptz": ColumnKind.TIMESTAMPTZ,
    "date": ColumnKind.DATE,
    "time without time zone": ColumnKind.TIME,
    "time": ColumnKind.TIME,
    "uuid": ColumnKind.UUID,
    "json": ColumnKind.JSON,
    "jsonb": ColumnKind.JSON,
}


def column_kind(declared_type: str) -> ColumnKind:
    """Map a declared SQL type name to its ColumnKind."""
    return _KIND_BY_DECLARED_TYPE.get(declared_type.strip().lower(), ColumnKind.OTHER)


@dataclass(frozen=True)
class ColumnMapping:
    """Per-column metadata: external parameter, database column, declared type."""
    parameter: str
    column: str
    column_type: str
    is_primary: bool = False

    @property
    def kind(self) -> ColumnKind:
        return column_kind(self.column_type)


@dataclass(frozen=True)
class PathMapping:
    path: str
    table: str


@dataclass(frozen=True)
class Behavior:
    """Path pattern, table name and column metadata for one table."""
    path_mapping: PathMapping
    columns: tuple[ColumnMapping, ...]

    @property
    def primary(self) -> ColumnMapping | None:
        return next((c for c in self.columns if c.is_primary), None)


@dataclass(frozen=True)
class Registry:
    """All Behaviors, plus the compiled path → Behavior route table."""
    behaviors: tuple[Behavior, ...]
    routes: Mapping[str, Behavior]

    @classmethod
    def from_behaviors(cls, behaviors: Iterable[Behavior]) -> "Registry":
        ordered = tuple(behaviors)
        routes: dict[str, Behavior] = {}
        for behavior in ordered:
            routes.setdefault(behavior.path_mapping.path, behavior)
        return cls(behaviors=ordered, routes=MappingProxyType(routes))

    def shadowed(self) -> list[Behavior]:
        """Behaviors whose path is owned by an earlier Behavior."""
        return [
            b for b in self.behaviors
            if self.routes[b.path_mapping.path] is not b
        ]

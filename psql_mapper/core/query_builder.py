"""Query Builder — SQLAlchemy Core statements for the five CRUD operations.

Invariants:
    - Builds statements, never executes them
    - Every submitted value is a bound parameter; nothing is spliced into SQL text
    - Known ColumnKinds are cast in Python before binding; OTHER values are bound as
      text and converted with CAST(... AS <declared type>) in SQL
    - Result columns are labelled with their parameter names
    - Empty values and unknown parameters are ignored everywhere

Design Decisions:
    - Lightweight table()/column() clauses over reflected Table objects: the
      Behavior already carries everything a statement needs
    - The identifier-update check compares submitted values to the primary-key
      column NAME; see DESIGN.md
"""

import re
from typing import Any, Mapping

import sqlalchemy as sa
from sqlalchemy import ColumnElement, Delete, Insert, Select, TableClause, Update
from sqlalchemy.dialects import postgresql
from sqlalchemy.types import TypeEngine, UserDefinedType

from psql_mapper.core.casting import cast_value
from psql_mapper.core.domain_types import Behavior, ColumnKind, ColumnMapping
from psql_mapper.core.errors import IdentifierUpdateError, ValidationError

_PLAIN_TYPE_NAME = re.compile(r"[a-z_][a-z0-9_ ]*(\([0-9, ]*\))?(\[\])?")


class DeclaredType(UserDefinedType):
    """Renders a catalog-declared type name verbatim in CAST expressions."""

    cache_ok = True

    def __init__(self, name: str):
        self.name = name

    def get_col_spec(self, **kw) -> str:
        if _PLAIN_TYPE_NAME.fullmatch(self.name):
            return self.name
        return '"{}"'.format(self.name.replace('"', '""'))


def sa_type_for(mapping: ColumnMapping) -> TypeEngine:
    """SQLAlchemy type used to bind and read values of a column."""
    kind = mapping.kind
    if kind is ColumnKind.TEXT:
        return sa.Text()
    if kind is ColumnKind.INTEGER:
        return sa.BigInteger()
    if kind is ColumnKind.NUMERIC:
        return sa.Numeric()
    if kind is ColumnKind.FLOAT:
        return sa.Float()
    if kind is ColumnKind.BOOLEAN:
        return sa.Boolean()
    if kind is ColumnKind.TIMESTAMP:
        return sa.DateTime()
    if kind is ColumnKind.TIMESTAMPTZ:
        return sa.DateTime(timezone=True)
    if kind is ColumnKind.DATE:
        return sa.Date()
    if kind is ColumnKind.TIME:
        return sa.Time()
    if kind is ColumnKind.UUID:
        return sa.Uuid()
    if kind is ColumnKind.JSON:
        if mapping.column_type.strip().lower() == "jsonb":
            return postgresql.JSONB()
        return sa.JSON()
    return sa.types.NullType()


def table_for(behavior: Behavior) -> TableClause:
    return sa.table(
        behavior.path_mapping.table,
        *(sa.column(c.column, sa_type_for(c)) for c in behavior.columns),
    )


def bound_value(mapping: ColumnMapping, raw: str) -> ColumnElement[Any]:
    """Bind a submitted value, cast to the column's declared type."""
    if mapping.kind is ColumnKind.OTHER:
        return sa.cast(sa.literal(raw, sa.Text()), DeclaredType(mapping.column_type))
    return sa.literal(cast_value(mapping, raw), sa_type_for(mapping))


def _labelled(table: TableClause, behavior: Behavior) -> list[ColumnElement[Any]]:
    return [table.c[c.column].label(c.parameter) for c in behavior.columns]


def _submitted(behavior: Behavior, params: Mapping[str, str]):
    """(mapping, value) pairs for known parameters with non-empty values."""
    for mapping in behavior.columns:
        value = params.get(mapping.parameter)
        if value:
            yield mapping, value


def require_primary(behavior: Behavior) -> ColumnMapping:
    primary = behavior.primary
    if primary is None:
        raise ValidationError("item identifier not supported")
    return primary


def _identifier_clause(table: TableClause, behavior: Behavior, identifier: str):
    primary = require_primary(behavior)
    return table.c[primary.column] == bound_value(primary, identifier)


def build_list(behavior: Behavior, filters: Mapping[str, str]) -> Select:
    """SELECT every column, ANDing an equality predicate per usable filter."""
    table = table_for(behavior)
    statement = sa.select(*_labelled(table, behavior)).select_from(table)
    predicates = [
        table.c[mapping.column] == bound_value(mapping, value)
        for mapping, value in _submitted(behavior, filters)
    ]
    if predicates:
        statement = statement.where(sa.and_(*predicates))
    return statement


def build_get_by_id(behavior: Behavior, identifier: str) -> Select:
    table = table_for(behavior)
    return (
        sa.select(*_labelled(table, behavior))
        .select_from(table)
        .where(_identifier_clause(table, behavior, identifier))
    )


def build_create(behavior: Behavior, params: Mapping[str, str]) -> Insert:
    """INSERT the submitted columns; omitted columns fall back to database defaults."""
    table = table_for(behavior)
    values = {
        table.c[mapping.column]: bound_value(mapping, value)
        for mapping, value in _submitted(behavior, params)
    }
    statement = sa.insert(table)
    if values:
        statement = statement.values(values)
    return statement.returning(*_labelled(table, behavior))


def check_identifier_update(behavior: Behavior, params: Mapping[str, str]) -> None:
    """Reject an update whose submitted value equals the primary-key column name."""
    primary = require_primary(behavior)
    for mapping in behavior.columns:
        if params.get(mapping.parameter) == primary.column:
            raise IdentifierUpdateError()


def build_update_by_id(
    behavior: Behavior, identifier: str, params: Mapping[str, str],
) -> Update:
    check_identifier_update(behavior, params)
    table = table_for(behavior)
    values = {
        table.c[mapping.column]: bound_value(mapping, value)
        for mapping, value in _submitted(behavior, params)
    }
    if not values:
        raise ValidationError("no fields to update")
    return (
        sa.update(table)
        .where(_identifier_clause(table, behavior, identifier))
        .values(values)
        .returning(*_labelled(table, behavior))
    )


def build_delete_by_id(behavior: Behavior, identifier: str) -> Delete:
    table = table_for(behavior)
    return sa.delete(table).where(_identifier_clause(table, behavior, identifier))

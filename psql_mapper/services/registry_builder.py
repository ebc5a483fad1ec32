"""Registry Builder — one sequential pass over the catalog into an immutable Registry.

Invariants:
    - Tables are visited in list_tables() order; columns in list_columns() order
    - Any catalog failure propagates; a partial Registry is never returned
    - A path claimed by two tables belongs to the first one (warning logged)
"""

import logging

from psql_mapper.core.domain_types import Behavior, ColumnMapping, PathMapping, Registry
from psql_mapper.core.naming import build_path, snake_case
from psql_mapper.core.repository_protocols import SchemaCatalog

logger = logging.getLogger(__name__)


async def build_behavior(
    catalog: SchemaCatalog,
    table: str,
    path_prefix: str = "",
    *,
    qualified_column_types: bool = False,
) -> Behavior:
    primary_key = await catalog.primary_key(table)
    columns = []
    for column in await catalog.list_columns(table):
        column_type = await catalog.column_type(
            column, table if qualified_column_types else None,
        )
        columns.append(ColumnMapping(
            parameter=snake_case(column),
            column=column,
            column_type=column_type,
            is_primary=column == primary_key,
        ))
    return Behavior(
        path_mapping=PathMapping(path=build_path(path_prefix, table), table=table),
        columns=tuple(columns),
    )


async def build_registry(
    catalog: SchemaCatalog,
    path_prefix: str = "",
    *,
    qualified_column_types: bool = False,
) -> Registry:
    """Introspect every table and build the Registry."""
    behaviors = []
    for table in await catalog.list_tables():
        behavior = await build_behavior(
            catalog, table, path_prefix,
            qualified_column_types=qualified_column_types,
        )
        logger.debug(
            f"Mapped {behavior.path_mapping.path} → {table}",
            extra={"table": table, "path": behavior.path_mapping.path},
        )
        behaviors.append(behavior)

    registry = Registry.from_behaviors(behaviors)
    for behavior in registry.shadowed():
        logger.warning(
            f"Table {behavior.path_mapping.table} shadowed at {behavior.path_mapping.path}",
            extra={"table": behavior.path_mapping.table, "path": behavior.path_mapping.path},
        )
    logger.info(
        f"Registry built: {len(registry.behaviors)} tables",
        extra={"tables": len(registry.behaviors), "prefix": path_prefix},
    )
    return registry

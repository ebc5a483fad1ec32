"""Schema Introspector — reads tables, columns, declared types and primary keys
from the PostgreSQL catalog.

Invariants:
    - Read-only: issues SELECTs against pg_catalog / information_schema only
    - Catalog identifiers are always bound parameters
    - pg_catalog and information_schema are invisible to every lookup; only
      tables visible on search_path are listed
    - column_type(column) without a table looks the column up by NAME ALONE; two
      user tables sharing a column name with different types collide (first
      catalog row wins). Passing table= restricts the lookup to that table.
    - primary_key returns None for tables without one (not an error)
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

_SYSTEM_SCHEMAS = "('pg_catalog', 'information_schema')"

# Only tables reachable by bare name: CRUD statements and primary_key resolve
# through search_path.
_TABLES_SQL = text(f"""
    SELECT tablename
    FROM pg_catalog.pg_tables
    WHERE schemaname NOT IN {_SYSTEM_SCHEMAS}
      AND pg_catalog.pg_table_is_visible(
            (quote_ident(schemaname) || '.' || quote_ident(tablename))::regclass)
    ORDER BY schemaname, tablename
""")

_COLUMNS_SQL = text(f"""
    SELECT column_name
    FROM information_schema.columns
    WHERE table_name = :table
      AND table_schema NOT IN {_SYSTEM_SCHEMAS}
    ORDER BY table_schema, ordinal_position
""")

# USER-DEFINED (enums, domains) and ARRAY report the castable udt_name instead.
_DECLARED_TYPE = """
    CASE WHEN data_type IN ('USER-DEFINED', 'ARRAY') THEN udt_name
         ELSE data_type
    END
"""

_COLUMN_TYPE_SQL = text(f"""
    SELECT {_DECLARED_TYPE}
    FROM information_schema.columns
    WHERE column_name = :column
      AND table_schema NOT IN {_SYSTEM_SCHEMAS}
    ORDER BY table_schema, table_name
    LIMIT 1
""")

_QUALIFIED_COLUMN_TYPE_SQL = text(f"""
    SELECT {_DECLARED_TYPE}
    FROM information_schema.columns
    WHERE column_name = :column
      AND table_name = :table
      AND table_schema NOT IN {_SYSTEM_SCHEMAS}
    ORDER BY table_schema
    LIMIT 1
""")

_PRIMARY_KEY_SQL = text("""
    SELECT a.attname
    FROM pg_index i
    JOIN pg_attribute a ON a.attrelid = i.indrelid
                       AND a.attnum = ANY(i.indkey)
    WHERE i.indrelid = to_regclass(quote_ident(:table))
      AND i.indisprimary
    ORDER BY a.attnum
    LIMIT 1
""")


class SchemaIntrospector:
    """SchemaCatalog implementation over a live connection."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def list_tables(self) -> list[str]:
        result = await self._conn.execute(_TABLES_SQL)
        return list(result.scalars().all())

    async def list_columns(self, table: str) -> list[str]:
        result = await self._conn.execute(_COLUMNS_SQL, {"table": table})
        return list(result.scalars().all())

    async def column_type(self, column: str, table: str | None = None) -> str:
        if table is None:
            result = await self._conn.execute(_COLUMN_TYPE_SQL, {"column": column})
        else:
            result = await self._conn.execute(
                _QUALIFIED_COLUMN_TYPE_SQL, {"column": column, "table": table},
            )
        declared = result.scalar_one_or_none()
        if declared is None:
            raise LookupError(f"No declared type for column {column!r}")
        return declared

    async def primary_key(self, table: str) -> str | None:
        result = await self._conn.execute(_PRIMARY_KEY_SQL, {"table": table})
        return result.scalar_one_or_none()

"""CRUD Engine — executes built statements against the shared pool.

Invariants:
    - One transaction per operation; no operation spans another
    - Rows come back as lists of {parameter: value} dicts
    - Reads never raise NotFoundError (an unknown id yields an empty list);
      delete_by_id raises NotFoundError when zero rows were affected
    - Driver errors arrive already classified by DatabaseSessionManager
    - No retries
"""

from typing import Any, Mapping

from sqlalchemy.sql.expression import Executable

from psql_mapper.core import query_builder
from psql_mapper.core.domain_types import Behavior
from psql_mapper.core.errors import NotFoundError
from psql_mapper.infrastructure.database import DatabaseSessionManager

Row = dict[str, Any]


class CrudEngine:
    """The five CRUD operations for any Behavior."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def _fetch(self, statement: Executable) -> list[Row]:
        async with self._db.connection() as conn:
            result = await conn.execute(statement)
            return [dict(row) for row in result.mappings()]

    async def list_items(self, behavior: Behavior, filters: Mapping[str, str]) -> list[Row]:
        return await self._fetch(query_builder.build_list(behavior, filters))

    async def get_by_id(self, behavior: Behavior, identifier: str) -> list[Row]:
        return await self._fetch(query_builder.build_get_by_id(behavior, identifier))

    async def create(self, behavior: Behavior, params: Mapping[str, str]) -> list[Row]:
        return await self._fetch(query_builder.build_create(behavior, params))

    async def update_by_id(
        self, behavior: Behavior, identifier: str, params: Mapping[str, str],
    ) -> list[Row]:
        return await self._fetch(
            query_builder.build_update_by_id(behavior, identifier, params),
        )

    async def delete_by_id(self, behavior: Behavior, identifier: str) -> None:
        statement = query_builder.build_delete_by_id(behavior, identifier)
        async with self._db.connection() as conn:
            result = await conn.execute(statement)
            if result.rowcount < 1:
                raise NotFoundError("item not found")

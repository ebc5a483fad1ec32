"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from services/ or infrastructure/
    - Catalog access is reached only through SchemaCatalog

Design Decisions:
    - Protocol over ABC: structural subtyping lets tests pass plain fakes
"""

from typing import Protocol


class SchemaCatalog(Protocol):
    """Catalog metadata reader — implemented by services.schema_introspector."""
    async def list_tables(self) -> list[str]: ...
    async def list_columns(self, table: str) -> list[str]: ...
    async def column_type(self, column: str, table: str | None = None) -> str: ...
    async def primary_key(self, table: str) -> str | None: ...

"""Request Dispatcher — (method, path, params) → CRUD operation → response envelope.

Invariants:
    - The Registry is passed in at construction and only read afterwards
    - No Behavior match ⇒ 404 "not found"; the CRUD engine is not touched
    - PUT and DELETE without a trailing identifier ⇒ 400 "missing item identifier"
    - Every MapperError becomes an envelope with its http_status; DatabaseError is
      logged at ERROR, other domain errors at INFO
    - Successful deletes answer 204 with no body; every other outcome has an envelope
    - Unexpected exceptions propagate to the global FastAPI handler

Design Decisions:
    - DispatchResult is transport-agnostic: the route renders it, tests inspect it
    - Unsupported methods on a matched path answer 404 like an unmatched path
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from fastapi.encoders import jsonable_encoder

from psql_mapper.core.domain_types import Registry
from psql_mapper.core.errors import (
    DatabaseError, MapperError, NotFoundError, ValidationError,
)
from psql_mapper.core.routing import RouteMatch, match_route
from psql_mapper.schemas.envelope import ResponseEnvelope
from psql_mapper.services.crud_engine import CrudEngine

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"


@dataclass(frozen=True)
class DispatchResult:
    status: int
    body: dict | None
    headers: dict[str, str] = field(default_factory=dict)


def _success(status: int, rows: Any = None) -> DispatchResult:
    data = None if rows is None else jsonable_encoder(rows)
    return DispatchResult(status, ResponseEnvelope(status=status, data=data).to_body())


class RequestDispatcher:
    """Routes requests to the CRUD engine using an immutable Registry."""

    def __init__(self, registry: Registry, engine: CrudEngine):
        self._registry = registry
        self._engine = engine

    @property
    def registry(self) -> Registry:
        return self._registry

    async def dispatch(
        self, method: str, path: str, params: Mapping[str, str],
    ) -> DispatchResult:
        match = match_route(self._registry, path)
        try:
            if match is None:
                raise NotFoundError()
            return await self._invoke(method.upper(), match, params)
        except MapperError as exc:
            return self._failure(exc, method, path)

    async def _invoke(
        self, method: str, match: RouteMatch, params: Mapping[str, str],
    ) -> DispatchResult:
        behavior = match.behavior
        if method == "OPTIONS":
            return DispatchResult(
                200, ResponseEnvelope(status=200).to_body(), {"Allow": ALLOWED_METHODS},
            )
        if method == "GET":
            if match.has_identifier:
                rows = await self._engine.get_by_id(behavior, match.identifier)
            else:
                rows = await self._engine.list_items(behavior, params)
            return _success(200, rows)
        if method == "POST":
            return _success(201, await self._engine.create(behavior, params))
        if method == "PUT":
            identifier = self._require_identifier(match)
            return _success(
                200, await self._engine.update_by_id(behavior, identifier, params),
            )
        if method == "DELETE":
            identifier = self._require_identifier(match)
            await self._engine.delete_by_id(behavior, identifier)
            return DispatchResult(204, None)
        raise NotFoundError()

    @staticmethod
    def _require_identifier(match: RouteMatch) -> str:
        if not match.has_identifier:
            raise ValidationError("missing item identifier")
        return match.identifier

    @staticmethod
    def _failure(exc: MapperError, method: str, path: str) -> DispatchResult:
        extra = {
            "method": method, "path": path,
            "status": exc.http_status, "error_code": exc.code,
        }
        if isinstance(exc, DatabaseError):
            logger.error(f"{method} {path} failed: {exc.message}", extra=extra)
        else:
            logger.info(f"{method} {path} rejected: {exc.message}", extra=extra)
        return DispatchResult(exc.http_status, exc.to_envelope())

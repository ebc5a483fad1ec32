"""Routing — resolve a request path against the Registry's compiled route table.

Invariants:
    - Lookup is two dict probes at most (collection path, then parent path)
    - A trailing identifier is exactly one non-empty path segment
    - Trailing slashes and doubled separators in the request path are ignored
"""

import re
from dataclasses import dataclass

from psql_mapper.core.domain_types import Behavior, Registry
from psql_mapper.core.naming import collapse_slashes

_IDENTIFIER_TOKEN = re.compile(r"[^/\s]+")


@dataclass(frozen=True)
class RouteMatch:
    behavior: Behavior
    identifier: str | None = None

    @property
    def has_identifier(self) -> bool:
        return self.identifier is not None


def normalize_path(path: str) -> str:
    path = collapse_slashes("/" + path)
    return path.rstrip("/") or "/"


def match_route(registry: Registry, path: str) -> RouteMatch | None:
    """Return the matched Behavior and optional identifier, or None."""
    path = normalize_path(path)
    behavior = registry.routes.get(path)
    if behavior is not None:
        return RouteMatch(behavior)

    parent, _, identifier = path.rpartition("/")
    behavior = registry.routes.get(parent or "/")
    if behavior is None or not _IDENTIFIER_TOKEN.fullmatch(identifier):
        return None
    return RouteMatch(behavior, identifier)

"""Naming — snake_case derivation for URL segments and request parameters.

Invariants:
    - snake_case is idempotent: snake_case(snake_case(x)) == snake_case(x)
    - build_path always starts with "/" and never contains "//"
"""

import re

_SEPARATORS = re.compile(r"[\s\-.]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def snake_case(name: str) -> str:
    """UserAccounts → user_accounts, HTTPServer → http_server, userID → user_id."""
    s = _SEPARATORS.sub("_", name.strip())
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", s)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    return _REPEATED_UNDERSCORES.sub("_", s).lower()


def collapse_slashes(path: str) -> str:
    return _REPEATED_SLASHES.sub("/", path)


def build_path(prefix: str, table: str) -> str:
    """Resource path for a table under the configured prefix."""
    return collapse_slashes(f"/{prefix}/{snake_case(table)}")

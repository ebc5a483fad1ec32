"""Driver Error Classification — map driver error codes onto the domain taxonomy.

Invariants:
    - Classification reads structured codes only (SQLSTATE, SQLite extended error
      names), never the error message text
    - unique_violation → DuplicateKeyError; every other condition → DatabaseError
      carrying the condition name
    - Unknown codes surface as the raw code; errors without a code surface as the
      driver exception class name

Design Decisions:
    - Both PostgreSQL and SQLite tables live here: the service runs on asyncpg, the
      test suite on aiosqlite, and both must classify identically
"""

from psql_mapper.core.errors import DatabaseError, DuplicateKeyError, MapperError

UNIQUE_VIOLATION = "unique_violation"

# PostgreSQL SQLSTATE → condition name (Appendix A of the PostgreSQL manual).
SQLSTATE_CONDITIONS: dict[str, str] = {
    "23505": UNIQUE_VIOLATION,
    "23503": "foreign_key_violation",
    "23502": "not_null_violation",
    "23514": "check_violation",
    "23P01": "exclusion_violation",
    "22001": "string_data_right_truncation",
    "22003": "numeric_value_out_of_range",
    "22007": "invalid_datetime_format",
    "22008": "datetime_field_overflow",
    "22012": "division_by_zero",
    "22P02": "invalid_text_representation",
    "42601": "syntax_error",
    "42703": "undefined_column",
    "42804": "datatype_mismatch",
    "42883": "undefined_function",
    "42P01": "undefined_table",
    "40001": "serialization_failure",
    "40P01": "deadlock_detected",
    "55P03": "lock_not_available",
    "57014": "query_canceled",
    "57P01": "admin_shutdown",
    "53300": "too_many_connections",
    "08000": "connection_exception",
    "08003": "connection_does_not_exist",
    "08006": "connection_failure",
    "28P01": "invalid_password",
    "3D000": "invalid_catalog_name",
}

# SQLite extended result code names → the equivalent PostgreSQL condition.
SQLITE_CONDITIONS: dict[str, str] = {
    "SQLITE_CONSTRAINT_UNIQUE": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_PRIMARYKEY": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_FOREIGNKEY": "foreign_key_violation",
    "SQLITE_CONSTRAINT_NOTNULL": "not_null_violation",
    "SQLITE_CONSTRAINT_CHECK": "check_violation",
    "SQLITE_BUSY": "lock_not_available",
    "SQLITE_LOCKED": "lock_not_available",
}

_DOMAIN_ERRORS: dict[str, type[MapperError]] = {
    UNIQUE_VIOLATION: DuplicateKeyError,
}


def _candidates(exc: BaseException):
    """The wrapped DBAPI error first, then whatever it was raised from."""
    orig = getattr(exc, "orig", None) or exc
    yield orig
    if orig.__cause__ is not None:
        yield orig.__cause__


def driver_condition(exc: BaseException) -> str:
    """Condition name for a driver (or SQLAlchemy-wrapped driver) exception."""
    for candidate in _candidates(exc):
        sqlstate = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if sqlstate:
            return SQLSTATE_CONDITIONS.get(sqlstate, sqlstate)
        errorname = getattr(candidate, "sqlite_errorname", None)
        if errorname:
            return SQLITE_CONDITIONS.get(errorname, errorname.lower())
    orig = getattr(exc, "orig", None) or exc
    return type(orig).__name__


def classify_driver_error(exc: BaseException) -> MapperError:
    condition = driver_condition(exc)
    error_cls = _DOMAIN_ERRORS.get(condition)
    if error_cls is not None:
        return error_cls()
    return DatabaseError(condition)

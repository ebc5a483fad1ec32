"""Driver Error Classification — structured codes map onto the domain taxonomy."""

import sqlite3

from sqlalchemy.exc import IntegrityError, OperationalError

from psql_mapper.core.driver_errors import classify_driver_error, driver_condition
from psql_mapper.core.errors import DatabaseError, DuplicateKeyError


class _PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"pg error {sqlstate}")
        self.sqlstate = sqlstate


class _SqliteError(Exception):
    def __init__(self, errorname):
        super().__init__(errorname)
        self.sqlite_errorname = errorname


def _wrapped(orig, cls=IntegrityError):
    return cls("INSERT ...", {}, orig)


def test_postgres_unique_violation_is_duplicate_key():
    error = classify_driver_error(_wrapped(_PgError("23505")))
    assert isinstance(error, DuplicateKeyError)
    assert error.http_status == 400
    assert error.message == "item identifier not unique"


def test_sqlite_unique_and_primary_key_violations_are_duplicate_key():
    for name in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"):
        assert isinstance(classify_driver_error(_wrapped(_SqliteError(name))), DuplicateKeyError)


def test_other_codes_become_database_error_with_condition_name():
    error = classify_driver_error(_wrapped(_PgError("23503")))
    assert isinstance(error, DatabaseError)
    assert error.message == "foreign_key_violation"
    assert error.http_status == 500


def test_unknown_sqlstate_surfaces_raw_code():
    assert driver_condition(_wrapped(_PgError("XX999"))) == "XX999"


def test_pgcode_attribute_is_read():
    class _Psycopg2Error(Exception):
        pgcode = "40P01"

    assert driver_condition(_wrapped(_Psycopg2Error(), OperationalError)) == "deadlock_detected"


def test_code_on_cause_is_used():
    orig = Exception("adapted")
    orig.__cause__ = _PgError("57014")
    assert driver_condition(_wrapped(orig, OperationalError)) == "query_canceled"


def test_errors_without_code_surface_class_name():
    error = classify_driver_error(_wrapped(ConnectionResetError(), OperationalError))
    assert isinstance(error, DatabaseError)
    assert error.message == "ConnectionResetError"


def test_real_sqlite_exception_is_classified():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE t (k TEXT UNIQUE)")
    conn.execute("INSERT INTO t VALUES ('a')")
    try:
        conn.execute("INSERT INTO t VALUES ('a')")
    except sqlite3.IntegrityError as e:
        assert driver_condition(e) == "unique_violation"
    else:
        raise AssertionError("expected IntegrityError")
    finally:
        conn.close()

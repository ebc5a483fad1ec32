"""Value Casting — per-ColumnKind conversion of submitted text."""

import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from psql_mapper.core.casting import cast_value
from psql_mapper.core.domain_types import ColumnMapping
from psql_mapper.core.errors import InvalidValueError


def _col(column_type):
    return ColumnMapping("field", "field", column_type)


def test_text_passes_through():
    assert cast_value(_col("character varying"), " alice ") == " alice "


def test_integer():
    assert cast_value(_col("integer"), "42") == 42
    assert cast_value(_col("bigint"), "-7") == -7


@pytest.mark.parametrize("raw", ["1.5", "abc", "1_000", ""])
def test_integer_rejects_non_integers(raw):
    with pytest.raises(InvalidValueError) as exc:
        cast_value(_col("integer"), raw)
    assert exc.value.parameter == "field"
    assert exc.value.http_status == 400


def test_numeric_and_float():
    assert cast_value(_col("numeric"), "10.50") == Decimal("10.50")
    assert cast_value(_col("double precision"), "2.5") == 2.5
    with pytest.raises(InvalidValueError):
        cast_value(_col("numeric"), "ten")


@pytest.mark.parametrize("raw, expected", [
    ("true", True), ("T", True), ("yes", True), ("1", True), ("on", True),
    ("false", False), ("f", False), ("no", False), ("0", False), ("OFF", False),
])
def test_boolean_literals(raw, expected):
    assert cast_value(_col("boolean"), raw) is expected


def test_boolean_rejects_other_text():
    with pytest.raises(InvalidValueError):
        cast_value(_col("boolean"), "maybe")


def test_timestamp_drops_offset():
    value = cast_value(_col("timestamp without time zone"), "2024-03-01T10:00:00+02:00")
    assert value == datetime(2024, 3, 1, 10, 0, 0)
    assert value.tzinfo is None


def test_timestamptz_assumes_utc_for_naive_input():
    value = cast_value(_col("timestamp with time zone"), "2024-03-01 10:00:00")
    assert value == datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_date_time_uuid():
    assert cast_value(_col("date"), "2024-03-01") == date(2024, 3, 1)
    assert cast_value(_col("time without time zone"), "08:30") == time(8, 30)
    uid = uuid.uuid4()
    assert cast_value(_col("uuid"), str(uid)) == uid
    with pytest.raises(InvalidValueError):
        cast_value(_col("uuid"), "not-a-uuid")


def test_json():
    assert cast_value(_col("jsonb"), '{"a": [1, 2]}') == {"a": [1, 2]}
    with pytest.raises(InvalidValueError):
        cast_value(_col("json"), "{broken")


def test_other_kind_passes_text_through():
    assert cast_value(_col("inet"), "10.0.0.1") == "10.0.0.1"

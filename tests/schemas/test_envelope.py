"""ResponseEnvelope — unset top-level fields are omitted, row nulls are kept."""

from psql_mapper.schemas.envelope import ResponseEnvelope


def test_status_only():
    assert ResponseEnvelope(status=200).to_body() == {"status": 200}


def test_error_envelope():
    assert ResponseEnvelope(status=404, msg="not found").to_body() == {
        "status": 404, "msg": "not found",
    }


def test_empty_data_is_kept():
    assert ResponseEnvelope(status=200, data=[]).to_body() == {"status": 200, "data": []}


def test_null_values_inside_rows_survive():
    body = ResponseEnvelope(status=201, data=[{"id": 1, "email": None}]).to_body()
    assert body == {"status": 201, "data": [{"id": 1, "email": None}]}

"""CRUD Engine — statements executed against a real (SQLite) database."""

import pytest

from psql_mapper.core.errors import (
    DuplicateKeyError, InvalidValueError, NotFoundError,
)
from tests.services.tables import USER_ACCOUNTS, USERS


async def test_create_returns_the_stored_row(alice):
    assert alice["id"] >= 1
    assert alice["name"] == "alice"
    assert alice["email"] == "alice@example.com"
    assert alice["active"] is True


async def test_get_by_id(crud, alice):
    rows = await crud.get_by_id(USERS, str(alice["id"]))
    assert rows == [alice]


async def test_get_unknown_id_is_empty(crud):
    assert await crud.get_by_id(USERS, "999999") == []


async def test_list_with_and_without_filters(crud, alice):
    await crud.create(USERS, {"name": "bob", "active": "false"})
    assert len(await crud.list_items(USERS, {})) == 2

    rows = await crud.list_items(USERS, {"name": "bob"})
    assert [r["name"] for r in rows] == ["bob"]
    assert rows[0]["email"] is None

    rows = await crud.list_items(USERS, {"name": "bob", "active": "true"})
    assert rows == []


async def test_list_ignores_unknown_filters(crud, alice):
    rows = await crud.list_items(USERS, {"nickname": "zzz"})
    assert len(rows) == 1


async def test_duplicate_unique_value(crud, alice):
    with pytest.raises(DuplicateKeyError):
        await crud.create(USERS, {"name": "alias", "email": "alice@example.com"})


async def test_invalid_identifier_never_reaches_the_database(crud):
    with pytest.raises(InvalidValueError):
        await crud.get_by_id(USERS, "abc")


async def test_update_returns_new_row(crud, alice):
    rows = await crud.update_by_id(USERS, str(alice["id"]), {"name": "alicia"})
    assert rows == [{**alice, "name": "alicia"}]


async def test_update_unknown_id_is_empty(crud):
    assert await crud.update_by_id(USERS, "999999", {"name": "x"}) == []


async def test_delete_then_delete_again(crud, alice):
    await crud.delete_by_id(USERS, str(alice["id"]))
    assert await crud.get_by_id(USERS, str(alice["id"])) == []
    with pytest.raises(NotFoundError) as exc:
        await crud.delete_by_id(USERS, str(alice["id"]))
    assert exc.value.message == "item not found"


async def test_camel_case_columns_use_parameter_names(crud):
    created = await crud.create(USER_ACCOUNTS, {"display_name": "Ada"})
    assert list(created[0]) == ["account_id", "display_name"]

    account_id = str(created[0]["account_id"])
    rows = await crud.list_items(USER_ACCOUNTS, {"display_name": "Ada"})
    assert rows == created
    rows = await crud.update_by_id(USER_ACCOUNTS, account_id, {"display_name": "Grace"})
    assert rows[0]["display_name"] == "Grace"


async def test_create_without_values_uses_defaults(crud):
    rows = await crud.create(USER_ACCOUNTS, {})
    assert rows[0]["display_name"] is None
    assert rows[0]["account_id"] >= 1

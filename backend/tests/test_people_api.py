"""Tests for the people API client and search."""

from __future__ import annotations

import pytest

from people_admin.forms import decode
from people_admin.models.people import PersonRecord
from people_admin.people_api import (
    PeopleAPIError,
    PersonNotFoundError,
    search_people,
)

from conftest import PEOPLE


@pytest.mark.asyncio
async def test_list_people(people_api, upstream):
    records = await people_api.list_people()

    assert [record.id for record in records] == ["1", "2"]
    assert records[1].deleted is True
    assert str(upstream.requests[-1].url) == "http://people.test/peoples"


@pytest.mark.asyncio
async def test_get_person(people_api):
    record = await people_api.get_person("1")
    assert record.name == "Akshay Donga"


@pytest.mark.asyncio
async def test_get_missing_person_raises_not_found(people_api):
    with pytest.raises(PersonNotFoundError) as excinfo:
        await people_api.get_person("404")
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_create_person_posts_nested_attributes(people_api, upstream):
    form = decode(
        [
            ("first_name", "Ravi"),
            ("last_name", "Shah"),
            ("emails[0].email", "ravi@example.com"),
            ("emails[0].is_primary", "on"),
        ]
    )

    record = await people_api.create_person(form)

    request = upstream.requests[-1]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert upstream.last_json()["emails_attributes"] == [
        {"email": "ravi@example.com", "is_primary": True}
    ]
    assert record.id == "3"
    assert record.primary_email == "ravi@example.com"


@pytest.mark.asyncio
async def test_update_person_puts_to_person_url(people_api, upstream):
    form = decode([("id", "2"), ("first_name", "Ankit"), ("last_name", "Mehta")])

    record = await people_api.update_person("2", form)

    assert upstream.requests[-1].method == "PUT"
    assert upstream.requests[-1].url.path == "/peoples/2"
    assert record.name == "Ankit Mehta"


@pytest.mark.asyncio
async def test_soft_delete_and_restore(people_api, upstream):
    await people_api.delete_person("1")
    assert upstream.people["1"]["deleted_at"] is not None

    await people_api.restore_person("1")
    assert upstream.people["1"]["deleted_at"] is None


@pytest.mark.asyncio
async def test_delete_people_sends_ids(people_api, upstream):
    await people_api.delete_people(["1", "2"])

    assert upstream.requests[-1].method == "DELETE"
    assert upstream.requests[-1].url.path == "/peoples/destroy_multiple"
    assert upstream.last_json() == {"ids": ["1", "2"]}


@pytest.mark.asyncio
async def test_error_status_raises(people_api, upstream):
    upstream.fail_with = 500

    with pytest.raises(PeopleAPIError) as excinfo:
        await people_api.list_people()
    assert excinfo.value.status_code == 500
    assert not isinstance(excinfo.value, PersonNotFoundError)


@pytest.mark.asyncio
async def test_transport_failure_raises(people_api, upstream):
    upstream.unreachable = True

    with pytest.raises(PeopleAPIError) as excinfo:
        await people_api.delete_person("1")
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_is_reachable(people_api, upstream):
    assert await people_api.is_reachable() is True

    upstream.fail_with = 503
    assert await people_api.is_reachable() is True

    upstream.unreachable = True
    assert await people_api.is_reachable() is False


def _records() -> list[PersonRecord]:
    return [PersonRecord.model_validate(person) for person in PEOPLE]


def test_search_without_query_returns_everyone():
    assert [record.id for record in search_people(_records())] == ["1", "2"]
    assert [record.id for record in search_people(_records(), "   ")] == ["1", "2"]


def test_search_matches_name_email_and_phone_case_insensitively():
    assert [record.id for record in search_people(_records(), "DONGA")] == ["1"]
    assert [record.id for record in search_people(_records(), "ankit@")] == ["2"]
    assert [record.id for record in search_people(_records(), "98765")] == ["1"]
    assert search_people(_records(), "nobody") == []


def test_search_can_hide_deleted_people():
    assert [record.id for record in search_people(_records(), include_deleted=False)] == ["1"]

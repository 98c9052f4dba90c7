"""Client for the external people REST API.

Every person record lives behind this API; people-admin only reads and
forwards.  Endpoints used (relative to the configured base URL):

- GET    /peoples                   -> list all people, soft-deleted included
- GET    /peoples/{id}              -> one person
- POST   /peoples                   -> create
- PUT    /peoples/{id}              -> update
- DELETE /peoples/{id}              -> soft delete
- DELETE /peoples/destroy_multiple  -> soft delete several, body {"ids": [...]}
- POST   /peoples/{id}/restore      -> undo a soft delete
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from people_admin.config import get_api_base_url, get_api_timeout
from people_admin.models.people import PersonForm, PersonRecord

logger = logging.getLogger(__name__)


class PeopleAPIError(Exception):
    """The people API could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PersonNotFoundError(PeopleAPIError):
    """The people API answered 404 for a person."""


class PeopleAPIClient:
    """Thin async wrapper around the people API endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url: str = (base_url or get_api_base_url()).rstrip("/")
        self.timeout: float = timeout if timeout is not None else get_api_timeout()
        self._transport = transport

    # -- reads ---------------------------------------------------------------

    async def list_people(self) -> list[PersonRecord]:
        data = await self._json("GET", "/peoples")
        if not isinstance(data, list):
            raise PeopleAPIError("People API returned a non-list body for /peoples")
        return [self._record(item) for item in data]

    async def get_person(self, person_id: str) -> PersonRecord:
        data = await self._json("GET", f"/peoples/{person_id}")
        return self._record(data)

    # -- writes --------------------------------------------------------------

    async def create_person(self, form: PersonForm) -> PersonRecord | None:
        data = await self._json("POST", "/peoples", json=form.to_api_payload())
        logger.info("Created person %s", _describe(data))
        return self._optional_record(data)

    async def update_person(self, person_id: str, form: PersonForm) -> PersonRecord | None:
        data = await self._json("PUT", f"/peoples/{person_id}", json=form.to_api_payload())
        logger.info("Updated person %s", person_id)
        return self._optional_record(data)

    async def delete_person(self, person_id: str) -> None:
        await self._request("DELETE", f"/peoples/{person_id}")
        logger.info("Soft-deleted person %s", person_id)

    async def delete_people(self, person_ids: list[str]) -> None:
        await self._request("DELETE", "/peoples/destroy_multiple", json={"ids": person_ids})
        logger.info("Soft-deleted %d people", len(person_ids))

    async def restore_person(self, person_id: str) -> None:
        await self._request("POST", f"/peoples/{person_id}/restore")
        logger.info("Restored person %s", person_id)

    async def is_reachable(self) -> bool:
        """Return True if the API answers at all, whatever the status."""
        try:
            async with self._client() as client:
                await client.get(f"{self.base_url}/peoples")
        except httpx.HTTPError as exc:
            logger.warning("People API at %s is unreachable: %s", self.base_url, exc)
            return False
        return True

    # -- plumbing ------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            async with self._client() as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.warning("People API request %s %s failed: %s", method, url, exc)
            raise PeopleAPIError(f"Could not reach the people API: {exc}") from exc

        if response.status_code == 404:
            raise PersonNotFoundError(f"Not found: {method} {path}", status_code=404)
        if response.is_error:
            logger.warning(
                "People API answered %d for %s %s: %s",
                response.status_code,
                method,
                url,
                response.text[:200],
            )
            raise PeopleAPIError(
                f"People API answered {response.status_code} for {method} {path}",
                status_code=response.status_code,
            )
        return response

    async def _json(self, method: str, path: str, json: Any = None) -> Any:
        response = await self._request(method, path, json=json)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PeopleAPIError(
                f"People API returned invalid JSON for {method} {path}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _record(data: Any) -> PersonRecord:
        try:
            return PersonRecord.model_validate(data)
        except ValidationError as exc:
            raise PeopleAPIError(f"Unexpected person record from the people API: {exc}") from exc

    @classmethod
    def _optional_record(cls, data: Any) -> PersonRecord | None:
        if isinstance(data, dict) and "id" in data:
            return cls._record(data)
        return None


def get_people_api() -> PeopleAPIClient:
    """FastAPI dependency returning a client for the configured API."""
    return PeopleAPIClient()


def search_people(
    records: list[PersonRecord],
    query: str | None = None,
    include_deleted: bool = True,
) -> list[PersonRecord]:
    """Filter *records* by a case-insensitive substring *query*.

    The query is matched against the full name, every email address and
    every phone number.  An empty query matches everyone.
    """
    needle = (query or "").strip().lower()
    results = []
    for record in records:
        if record.deleted and not include_deleted:
            continue
        if needle and not any(needle in text.lower() for text in _searchable(record)):
            continue
        results.append(record)
    return results


def _searchable(record: PersonRecord) -> list[str]:
    texts = [record.name]
    texts.extend(entry.email for entry in record.emails if isinstance(entry.email, str))
    texts.extend(
        entry.mobile_number
        for entry in record.phone_numbers
        if isinstance(entry.mobile_number, str)
    )
    return texts


def _describe(data: Any) -> str:
    if isinstance(data, dict) and "id" in data:
        return str(data["id"])
    return "(no id returned)"

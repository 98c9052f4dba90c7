"""Shared fixtures: an in-memory stand-in for the people API."""

from __future__ import annotations

import copy
import json
import re

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from people_admin.people_api import PeopleAPIClient, get_people_api
from people_admin.routes import health, people

API_BASE_URL = "http://people.test"

PEOPLE = [
    {
        "id": 1,
        "first_name": "Akshay",
        "last_name": "Donga",
        "date_of_birth": "1990-04-12",
        "emails": [
            {
                "id": 11,
                "email": "akshay@example.com",
                "is_primary": True,
                "person_id": 1,
                "created_at": "2024-10-01T09:00:00.000Z",
            },
            {"id": 12, "email": "a.donga@work.example", "is_primary": False},
        ],
        "phone_numbers": [{"id": 21, "mobile_number": "9876543210", "is_primary": True}],
        "addresses": [
            {
                "id": 31,
                "street": "12 Ring Road",
                "city": "Surat",
                "state": "Gujarat",
                "country": "India",
                "landmark": "Near the park",
                "postal_code": "395007",
                "is_primary": True,
            }
        ],
        "deleted_at": None,
    },
    {
        "id": 2,
        "first_name": "Ankit",
        "last_name": "Patel",
        "date_of_birth": "1988-09-30",
        "emails": [{"id": 13, "email": "ankit@example.com", "is_primary": False}],
        "phone_numbers": [],
        "addresses": [],
        "deleted_at": "2024-11-02T10:00:00.000Z",
    },
]

_PERSON_PATH = re.compile(r"/peoples/(?P<id>[^/]+)(?P<restore>/restore)?")


class FakePeopleAPI:
    """Callable handler for ``httpx.MockTransport`` mimicking the people API."""

    def __init__(self, people: list[dict]) -> None:
        self.people = {str(person["id"]): copy.deepcopy(person) for person in people}
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None
        self.unreachable = False

    def last_json(self):
        return json.loads(self.requests[-1].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": "boom"})

        method, path = request.method, request.url.path

        if path == "/peoples" and method == "GET":
            return httpx.Response(200, json=list(self.people.values()))
        if path == "/peoples" and method == "POST":
            person_id = str(max(int(key) for key in self.people) + 1)
            self.people[person_id] = self._record(person_id, json.loads(request.content))
            return httpx.Response(201, json=self.people[person_id])
        if path == "/peoples/destroy_multiple" and method == "DELETE":
            for person_id in json.loads(request.content)["ids"]:
                if person_id in self.people:
                    self.people[person_id]["deleted_at"] = "2025-01-01T00:00:00.000Z"
            return httpx.Response(204)

        match = _PERSON_PATH.fullmatch(path)
        if match is None or match.group("id") not in self.people:
            return httpx.Response(404, json={"error": "not found"})
        person_id = match.group("id")

        if match.group("restore") and method == "POST":
            self.people[person_id]["deleted_at"] = None
            return httpx.Response(200, json=self.people[person_id])
        if method == "GET":
            return httpx.Response(200, json=self.people[person_id])
        if method == "PUT":
            self.people[person_id] = self._record(person_id, json.loads(request.content))
            return httpx.Response(200, json=self.people[person_id])
        if method == "DELETE":
            self.people[person_id]["deleted_at"] = "2025-01-01T00:00:00.000Z"
            return httpx.Response(204)
        return httpx.Response(405)

    @staticmethod
    def _record(person_id: str, payload: dict) -> dict:
        return {
            "id": int(person_id),
            "first_name": payload.get("first_name"),
            "last_name": payload.get("last_name"),
            "date_of_birth": payload.get("date_of_birth"),
            "emails": payload.get("emails_attributes", []),
            "phone_numbers": payload.get("phone_numbers_attributes", []),
            "addresses": payload.get("addresses_attributes", []),
            "deleted_at": None,
        }


@pytest.fixture
def upstream() -> FakePeopleAPI:
    return FakePeopleAPI(PEOPLE)


@pytest.fixture
def people_api(upstream: FakePeopleAPI) -> PeopleAPIClient:
    return PeopleAPIClient(
        base_url=API_BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(upstream),
    )


@pytest.fixture
def app(people_api: PeopleAPIClient) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(people.router)
    app.dependency_overrides[get_people_api] = lambda: people_api
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)

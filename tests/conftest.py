"""Shared fixtures: in-memory stores and a fully wired app."""

import copy
import uuid
from collections import defaultdict

import pytest
from fastapi.testclient import TestClient

from stockroom.api import build_container, create_app

PROTECTED = ("id", "_id", "createdAt")


class InMemoryDocumentStore:
    """DocumentStore keeping every collection in a dict."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict]] = defaultdict(dict)
        self.healthy = True

    async def create(self, collection, data):
        document = {k: v for k, v in data.items() if k not in ("id", "_id")}
        document["id"] = uuid.uuid4().hex
        self.collections[collection][document["id"]] = document
        return copy.deepcopy(document)

    async def get_by_id(self, collection, id_):
        document = self.collections[collection].get(id_)
        return copy.deepcopy(document) if document else None

    async def get_all(self, collection):
        return [copy.deepcopy(d) for d in self.collections[collection].values()]

    async def find_one(self, collection, filters):
        matches = await self.find_all(collection, filters)
        return matches[0] if matches else None

    async def find_all(self, collection, filters):
        return [
            copy.deepcopy(d)
            for d in self.collections[collection].values()
            if all(d.get(key) == value for key, value in filters.items())
        ]

    async def update(self, collection, data):
        document = self.collections[collection].get(data.get("id"))
        if document is None:
            return None
        document.update({k: v for k, v in data.items() if k not in PROTECTED})
        return copy.deepcopy(document)

    async def delete(self, collection, id_):
        return self.collections[collection].pop(id_, None) is not None

    async def health_check(self):
        return self.healthy


class InMemorySessionStore:
    """SessionStore keeping tokens in a dict; ttls are recorded, not enforced."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.healthy = True

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ttl=None):
        self.values[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.ttls.pop(key, None)
        return self.values.pop(key, None) is not None

    async def health_check(self):
        return self.healthy


@pytest.fixture
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def container(document_store, session_store):
    return build_container(document_store=document_store, session_store=session_store)


@pytest.fixture
def app(container):
    return create_app(container=container)


@pytest.fixture
def client(app):
    """Test client with startup (seeding) and shutdown hooks running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def login(client):
    """POST credentials to the login endpoint."""

    def _login(username="admin", password="admin"):
        return client.post("/auth/", json={"username": username, "password": password})

    return _login


@pytest.fixture
def auth_headers(login):
    """Session headers of the seeded admin user."""
    response = login()
    assert response.status_code == 200
    token = response.json()["token"]
    return {"auth-id": token["auth_id"], "auth-token": token["auth_token"]}

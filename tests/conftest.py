"""Pytest configuration and fixtures."""
import copy
import os
from datetime import date, datetime, timezone
from types import SimpleNamespace

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport


def _matches(doc: dict, query: dict) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            for op, operand in condition.items():
                if op == "$lt" and not (value is not None and value < operand):
                    return False
                if op == "$ne" and value == operand:
                    return False
                if op == "$in" and value not in operand:
                    return False
        elif value != condition:
            return False
    return True


def _apply_update(doc: dict, update: dict) -> None:
    for field, value in update.get("$set", {}).items():
        doc[field] = copy.deepcopy(value)
    for field, value in update.get("$inc", {}).items():
        doc[field] = doc.get(field, 0) + value


class FakeCursor:
    """Minimal stand-in for a Motor cursor."""

    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """In-memory collection supporting the calls the services make."""

    def __init__(self):
        self.docs: list[dict] = []

    def _find(self, query):
        return [doc for doc in self.docs if _matches(doc, query)]

    async def find_one(self, query):
        found = self._find(query)
        return copy.deepcopy(found[0]) if found else None

    def find(self, query):
        return FakeCursor([copy.deepcopy(doc) for doc in self._find(query)])

    async def count_documents(self, query):
        return len(self._find(query))

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def replace_one(self, query, replacement):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                new_doc = copy.deepcopy(replacement)
                new_doc["_id"] = doc["_id"]
                self.docs[index] = new_doc
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_one(self, query, update):
        found = self._find(query)
        if not found:
            return SimpleNamespace(matched_count=0, modified_count=0)
        _apply_update(found[0], update)
        return SimpleNamespace(matched_count=1, modified_count=1)

    async def find_one_and_update(self, query, update, return_document=None):
        found = self._find(query)
        if not found:
            return None
        _apply_update(found[0], update)
        return copy.deepcopy(found[0])

    async def delete_one(self, query):
        found = self._find(query)
        if found:
            self.docs.remove(found[0])
        return SimpleNamespace(deleted_count=len(found[:1]))

    async def delete_many(self, query):
        found = self._find(query)
        for doc in found:
            self.docs.remove(doc)
        return SimpleNamespace(deleted_count=len(found))


class FakeDatabase:
    """Dict of FakeCollections, created on first access."""

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def make_goal():
    """Factory for MicroGoal records with fresh-habit defaults."""
    from goaltracker.models.micro_goal import MicroGoal

    def _make(**overrides):
        fields = {
            "_id": str(ObjectId()),
            "user_id": "user123",
            "macro_goal_id": str(ObjectId()),
            "title": "Read 20 pages",
            "xp_value": 10,
            "frequency": "daily",
            "custom_days": [],
            "streak": 0,
            "last_completed": None,
            "completion_history": [],
            "completed": False,
            "is_archived": False,
            "created_at": datetime(2024, 5, 1, 8, 0),
            "updated_at": datetime(2024, 5, 1, 8, 0),
        }
        fields.update(overrides)
        return MicroGoal(**fields)

    return _make


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def today_holder():
    """Mutable "today" for the app clock; tests move it forward."""
    return {"today": date(2024, 5, 11)}


@pytest_asyncio.fixture
async def app_client(fake_db, today_holder):
    """
    HTTP client against the app with an in-memory database.

    - ``get_database`` is overridden with a FakeDatabase
    - ``get_clock`` reads "today" from ``today_holder``
    """
    from goaltracker.core.clock import Clock
    from goaltracker.database import get_database
    from goaltracker.main import app
    from goaltracker.routers.micro_goals import get_clock

    def fixed_clock():
        current = today_holder["today"]
        return Clock(
            timezone.utc,
            now=lambda: datetime(current.year, current.month, current.day, 12, tzinfo=timezone.utc),
        )

    app.dependency_overrides[get_database] = lambda: fake_db
    app.dependency_overrides[get_clock] = fixed_clock

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


async def register_and_login(client, email="test@example.com"):
    """Create a user and return bearer headers for it."""
    await client.post(
        "/auth/register",
        json={"email": email, "password": "password123", "display_name": "Test User"},
    )
    response = await client.post(
        "/auth/login",
        json={"email": email, "password": "password123"},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login_as(app_client):
    """Coroutine factory: ``headers = await login_as("other@example.com")``."""

    async def _login(email):
        return await register_and_login(app_client, email)

    return _login


@pytest_asyncio.fixture
async def auth_headers(app_client):
    return await register_and_login(app_client)

"""Shared pytest fixtures."""

import copy
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

from taskhub.app import App
from taskhub.config import Config
from taskhub.web.server import create_fastapi_app

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz"
FROZEN_AT = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, at: datetime) -> None:
        self.at = at

    def __call__(self) -> datetime:
        return self.at

    def advance(self, **kwargs: float) -> None:
        self.at += timedelta(**kwargs)


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    """Subset of AsyncCursor used by the services."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        if count:
            self._docs = self._docs[:count]
        return self

    async def __aiter__(self):  # type: ignore[no-untyped-def]
        for doc in self._docs:
            yield doc


class FakeCollection:
    """In-memory stand-in for an AsyncCollection (equality filters only)."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        return "_".join(f"{name}_{direction}" for name, direction in keys)

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def find_one(self, query: dict[str, Any], sort: list[tuple[str, int]] | None = None) -> dict[str, Any] | None:
        cursor = self.find(query)
        for key, direction in reversed(sort or []):
            cursor.sort(key, direction)
        async for doc in cursor:
            return doc
        return None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for doc in self.docs:
            if _matches(doc, query):
                for key, value in update.get("$set", {}).items():
                    doc[key] = copy.deepcopy(value)
                for key, value in update.get("$push", {}).items():
                    doc.setdefault(key, []).append(copy.deepcopy(value))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for doc in self.docs if _matches(doc, query))


class FakeDatabase:
    def __init__(self, name: str) -> None:
        self.name = name
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeMongoClient:
    def __init__(self, url: str, **kwargs: Any) -> None:
        self.url = url
        self.databases: dict[str, FakeDatabase] = {}

    def get_database(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase(name))

    async def aclose(self) -> None:
        pass


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FROZEN_AT)


@pytest.fixture
def secret() -> str:
    return TEST_SECRET


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="mongodb://localhost:27017/taskhub_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        jwt_secret=TEST_SECRET,
        environment="test",
    )


@pytest.fixture
def client(config: Config, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """API client backed by an in-memory database."""
    monkeypatch.setattr("taskhub.core.core.AsyncMongoClient", FakeMongoClient)
    fastapi_app = create_fastapi_app(App(config), config)
    with TestClient(fastapi_app) as test_client:
        yield test_client

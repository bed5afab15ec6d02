from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from usefulwork.config import Settings, load_settings
from usefulwork.main import create_app
from usefulwork.routes.work import get_database, get_search_client


class FakeCollection:
    """In-memory stand-in for an ``AsyncCollection`` keyed by ``_id``."""

    def __init__(self) -> None:
        self.documents: dict[Any, dict[str, Any]] = {}

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        key = document["_id"]
        if key in self.documents:
            raise DuplicateKeyError(f"E11000 duplicate key error: {key}")
        self.documents[key] = copy.deepcopy(document)
        return SimpleNamespace(inserted_id=key)

    async def find_one(self, flt: dict[str, Any]) -> dict[str, Any] | None:
        doc = self.documents.get(flt["_id"])
        return copy.deepcopy(doc) if doc is not None else None


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeSearchClient:
    """In-memory stand-in for ``AsyncElasticsearch`` supporting ``multi_match``."""

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, dict[str, Any]]] = {}
        self.index_calls: list[dict[str, Any]] = []
        self.closed = False

    async def index(self, *, index: str, id: str, document: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        self.index_calls.append({"index": index, "id": id, **kwargs})
        self.indices.setdefault(index, {})[id] = copy.deepcopy(document)
        return {"_id": id, "result": "created"}

    async def search(self, *, index: str, query: dict[str, Any]) -> dict[str, Any]:
        match = query["multi_match"]
        terms = set(str(match["query"]).lower().split())
        hits = []
        for doc_id, source in self.indices.get(index, {}).items():
            for field in match["fields"]:
                if terms & set(str(source.get(field, "")).lower().split()):
                    hits.append({"_id": doc_id, "_source": copy.deepcopy(source)})
                    break
        return {"hits": {"total": {"value": len(hits)}, "hits": hits}}

    async def info(self) -> dict[str, Any]:
        return {"version": {"number": "8.0.0"}}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return load_settings({})


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_search() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def test_app(settings: Settings, fake_database: FakeDatabase, fake_search: FakeSearchClient) -> FastAPI:
    app = create_app(settings)
    app.dependency_overrides[get_database] = lambda: fake_database
    app.dependency_overrides[get_search_client] = lambda: fake_search
    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    # Not used as a context manager, so the lifespan (real clients) never runs.
    return TestClient(test_app)

# tests/conftest.py
import copy
import json
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

import bson
import httpx
import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

from firealert.config import Settings
from firealert.main import create_app
from firealert.services.event_store import EventStore
from firealert.services.notifier import NotificationDispatcher

WHATSAPP_ENV = {
    "WHATSAPP_PHONE_NUMBER_ID": "1234567890",
    "WHATSAPP_ACCESS_TOKEN": "wa-token",
    "WHATSAPP_TO": "15550001111",
}


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs, fail: bool = False):
        self._docs = docs
        self._fail = fail

    def sort(self, keys):
        # apply the least significant key first; Python's sort is stable
        for field, direction in reversed(keys):
            self._docs.sort(key=lambda d: d[field], reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    async def _iter(self):
        if self._fail:
            raise AutoReconnect("connection reset by peer")
        for d in self._docs:
            yield copy.deepcopy(d)

    def __aiter__(self):
        return self._iter()


class FakeCollection:
    """In-memory stand-in for the motor collection methods EventStore uses."""

    def __init__(self):
        self.docs: List[dict] = []
        self.indexes = []
        self.fail_writes = False
        self.fail_reads = False

    async def insert_one(self, doc):
        if self.fail_writes:
            raise ServerSelectionTimeoutError("No servers available")
        doc.setdefault("_id", ObjectId())
        # pymongo encodes before sending; unencodable documents fail here
        bson.encode(doc)
        self.docs.append(copy.deepcopy(doc))
        return FakeInsertResult(doc["_id"])

    def find(self, query):
        assert query == {}
        return FakeCursor([copy.deepcopy(d) for d in self.docs], fail=self.fail_reads)

    async def create_index(self, keys, **kwargs):
        self.indexes.append(keys)
        return "_".join(f"{k}_{d}" for k, d in keys)


def make_settings(**overrides) -> Settings:
    values = {"MONGODB_URI": "mongodb://localhost:27017/fire_test", "API_KEY": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class Outbox:
    """Records requests sent to the stubbed WhatsApp API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []

    @property
    def bodies(self):
        return [json.loads(r.content) for r in self.requests]

    def ok_handler(self, request: httpx.Request):
        self.requests.append(request)
        return httpx.Response(200, json={"messaging_product": "whatsapp", "messages": [{"id": "wamid.TEST"}]})


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return EventStore(collection)


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def build_app(store, outbox):
    """
    build_app(api_key="", whatsapp=True, handler=None) -> (app, dispatcher)
    handler defaults to the outbox recorder.
    """
    def _build(api_key: str = "", whatsapp: bool = True, handler: Optional[Callable] = None, **overrides):
        env = dict(WHATSAPP_ENV) if whatsapp else {}
        env.update(overrides)
        settings = make_settings(API_KEY=api_key, **env)
        transport = httpx.MockTransport(handler or outbox.ok_handler)
        dispatcher = NotificationDispatcher(settings, client=httpx.AsyncClient(transport=transport))
        app = create_app(settings, store=store, dispatcher=dispatcher)
        return app, dispatcher

    return _build


@asynccontextmanager
async def client_for(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c

"""Shared fixtures: an in-memory stand-in for the Motor database and stub remote clients."""
import asyncio

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from clients.storage_client import get_attachment_relay
from core.config import Settings, get_settings
from core.exceptions import AttachmentUploadError, InferenceError
from db.connection import CODEC_OPTIONS, get_db
from llm.llm_client import get_llm_client


def _read(doc):
    """Return the document as a Motor read would: BSON round-tripped with the client codec options."""
    return bson.decode(bson.encode(doc), codec_options=CODEC_OPTIONS)


def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$gt" in expected:
            if value is None or not value > expected["$gt"]:
                return False
        elif value != expected:
            return False
    return True


def _apply_update(doc, update, inserting=False):
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key, value in update.get("$inc", {}).items():
        doc[key] = doc.get(key, 0) + value
    if inserting:
        for key, value in update.get("$setOnInsert", {}).items():
            doc[key] = value


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self._limit = None

    def sort(self, keys, direction=None):
        if isinstance(keys, str):
            keys = [(keys, direction)]
        for key, order in reversed(keys):
            self._docs.sort(key=lambda d: d.get(key), reverse=order < 0)
        return self

    def limit(self, n):
        self._limit = n
        return self

    async def to_list(self, length=None):
        caps = [x for x in (self._limit, length) if x]
        docs = self._docs[:min(caps)] if caps else self._docs
        return [_read(d) for d in docs]


class FakeCollection:
    def __init__(self):
        self.docs = []

    async def create_index(self, keys, **kwargs):
        return "index"

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return _read(doc)
        return None

    async def insert_one(self, doc):
        stored = dict(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return FakeInsertResult(stored["_id"])

    def find(self, query):
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return

    async def find_one_and_update(self, query, update, upsert=False, return_document=False):
        # Yield first so concurrent callers interleave; the match and update below stay atomic.
        await asyncio.sleep(0)
        for doc in self.docs:
            if _matches(doc, query):
                before = _read(doc)
                _apply_update(doc, update)
                return _read(doc) if return_document else before
        if not upsert:
            return None
        doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        doc["_id"] = ObjectId()
        _apply_update(doc, update, inserting=True)
        self.docs.append(doc)
        return _read(doc) if return_document else None


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class StubLLM:
    def __init__(self, answer="Follow these steps...", configured=True):
        self.answer = answer
        self.configured = configured
        self.fail_with = None
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    async def generate(self, parts):
        await asyncio.sleep(0)
        self.calls.append(parts)
        if self.fail_with is not None:
            raise InferenceError(self.fail_with)
        return self.answer


class StubRelay:
    def __init__(self, url="https://res.cloudinary.com/demo/legal-app/file.png"):
        self.url = url
        self.fail = False
        self.calls = []

    @property
    def is_configured(self):
        return True

    async def upload(self, base64_payload, mime_type):
        self.calls.append((base64_payload, mime_type))
        if self.fail:
            raise AttachmentUploadError("upload rejected")
        return self.url


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def stub_llm():
    return StubLLM()


@pytest.fixture
def stub_relay():
    return StubRelay()


@pytest.fixture
def settings():
    return Settings(_env_file=None, GEMINI_API_KEY="test-key")


@pytest.fixture
def client(fake_db, stub_llm, stub_relay, settings):
    from main import app

    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_llm_client] = lambda: stub_llm
    app.dependency_overrides[get_attachment_relay] = lambda: stub_relay
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()

"""Shared fixtures: an in-memory stand-in for the workflows collection,
a repository on top of it and a TestClient wired to that repository."""
import copy
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from playbook_studio.api import app
from playbook_studio.dependencies.repository import get_repo
from playbook_studio.workflows.workflow_repository import WorkflowRepository


def _matches(doc, query):
    return all(doc.get(key) == value for key, value in query.items())


def _evaluate(expr, doc):
    """The handful of aggregation operators the repository's pipeline updates use"""
    if isinstance(expr, str) and expr.startswith("$"):
        return doc.get(expr[1:])
    if isinstance(expr, dict) and len(expr) == 1:
        op, args = next(iter(expr.items()))
        if op == "$literal":
            return copy.deepcopy(args)
        if op == "$max":
            values = [_evaluate(arg, doc) for arg in args]
            return max((v for v in values if v is not None), default=None)
        if op == "$add":
            values = [_evaluate(arg, doc) for arg in args]
            if any(v is None for v in values):
                return None
            dates = [v for v in values if isinstance(v, datetime)]
            millis = sum(v for v in values if not isinstance(v, datetime))
            return dates[0] + timedelta(milliseconds=millis) if dates else millis
    return copy.deepcopy(expr)


class FakeCursor:
    """Supports the find().sort() + async iteration the repository uses"""

    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction):
        self._docs.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Minimal async collection keyed by ObjectId; updates take a $set pipeline"""

    def __init__(self):
        self.docs = {}

    async def insert_one(self, doc):
        oid = ObjectId()
        stored = copy.deepcopy(doc)
        stored["_id"] = oid
        self.docs[oid] = stored
        return SimpleNamespace(inserted_id=oid)

    async def find_one(self, query):
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query):
        return FakeCursor(copy.deepcopy(doc) for doc in self.docs.values() if _matches(doc, query))

    async def update_one(self, query, update):
        for doc in self.docs.values():
            if _matches(doc, query):
                for stage in update:
                    # every expression in a stage sees the document as it was before it
                    doc.update({name: _evaluate(expr, doc) for name, expr in stage["$set"].items()})
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for oid, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[oid]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def repo(fake_collection):
    return WorkflowRepository(fake_collection)


@pytest.fixture
def test_client(repo):
    """TestClient with the repository dependency pointed at the fake collection"""
    app.dependency_overrides[get_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def ai_step():
    return {"id": 1, "instruction": "Pull the Gong recordings from today's discovery calls", "executor": "ai"}


@pytest.fixture
def human_step():
    return {"id": 2, "instruction": "Review the call summary", "executor": "human", "assignedHuman": "Jason Mao"}

"""Shared fixtures: an in-memory document store and a signed-in context."""
import itertools
from collections import defaultdict
from unittest.mock import MagicMock

import pytest

from clinic.auth import FirebaseAuth, Identity
from clinic.dashboards import Context
from clinic.errors import NotFoundError, StorageError
from clinic.session import Navigator


class FakeStore:
    """Dict-backed stand-in for FirestoreStore with synchronous live queries."""

    def __init__(self):
        self.collections = defaultdict(dict)
        self.listeners = []
        self.fail_with = None
        self._ids = itertools.count(1)

    def _check(self):
        if self.fail_with:
            raise StorageError(self.fail_with)

    def _matching(self, collection, field, value):
        return [
            {"id": doc_id, **data}
            for doc_id, data in self.collections[collection].items()
            if data.get(field) == value
        ]

    def _notify(self, collection):
        for listener in list(self.listeners):
            coll, field, value, on_change = listener
            if coll == collection:
                on_change(self._matching(coll, field, value))

    def get_one(self, collection, doc_id):
        self._check()
        if doc_id not in self.collections[collection]:
            raise NotFoundError(f"{collection}/{doc_id}")
        return {"id": doc_id, **self.collections[collection][doc_id]}

    def upsert_merge(self, collection, doc_id, fields):
        self._check()
        self.collections[collection].setdefault(doc_id, {}).update(fields)
        self._notify(collection)

    def insert(self, collection, fields):
        self._check()
        doc_id = f"doc-{next(self._ids)}"
        self.collections[collection][doc_id] = dict(fields)
        self._notify(collection)
        return doc_id

    def get_all(self, collection):
        self._check()
        return [{"id": doc_id, **data} for doc_id, data in self.collections[collection].items()]

    def subscribe_query(self, collection, where, on_change):
        self._check()
        field, op, value = where
        assert op == "=="
        listener = (collection, field, value, on_change)
        self.listeners.append(listener)
        on_change(self._matching(collection, field, value))

        def release():
            if listener in self.listeners:
                self.listeners.remove(listener)

        return release


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def auth():
    return FirebaseAuth("test-key", session=MagicMock())


@pytest.fixture
def rerun():
    return MagicMock()


@pytest.fixture
def navigator(rerun):
    return Navigator({}, rerun)


@pytest.fixture
def ctx(store, auth, navigator):
    return Context(store=store, auth=auth, navigator=navigator)


@pytest.fixture
def sign_in(auth):
    """Make *uid* the provider's current identity, notifying listeners."""
    def _sign_in(uid, email=""):
        auth._set_current(Identity(uid=uid, email=email))
        return auth.current

    return _sign_in

"""
Shared fixtures for the Orderdesk test-suite.

FakeStore stands in for the Sanity client: it keeps documents in a dict,
records every call and can be told to fail a given operation.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from orderdesk import OrderDesk
from orderdesk.core.document_store import DocumentStoreError


class FakePatch:
    def __init__(self, store, document_id):
        self.store = store
        self.document_id = document_id
        self.fields = {}

    def set(self, fields):
        self.fields.update(fields)
        return self

    def commit(self):
        self.store.calls.append(('patch', self.document_id, dict(self.fields)))
        self.store._maybe_fail('patch')
        doc = self.store.documents[self.document_id]
        doc.update(self.fields)
        return dict(doc)


class FakeStore:
    configured = True

    def __init__(self, documents=None):
        self.documents = dict((doc['_id'], dict(doc)) for doc in documents or [])
        self.calls = []
        self.failing = set()
        self._next_id = 1

    def _maybe_fail(self, operation):
        if operation in self.failing:
            raise DocumentStoreError(f"{operation} rejected", status_code=500)

    def fetch(self, query, params=None):
        self.calls.append(('fetch', query, params))
        self._maybe_fail('fetch')
        return [dict(doc) for doc in self.documents.values()]

    def create(self, document):
        self.calls.append(('create', dict(document)))
        self._maybe_fail('create')
        doc = dict(document)
        doc['_id'] = f"order-new-{self._next_id}"
        self._next_id += 1
        self.documents[doc['_id']] = doc
        return dict(doc)

    def patch(self, document_id):
        return FakePatch(self, document_id)

    def delete(self, document_id):
        self.calls.append(('delete', document_id))
        self._maybe_fail('delete')
        self.documents.pop(document_id, None)
        return {'id': document_id, 'operation': 'delete'}

    def ping(self):
        self._maybe_fail('ping')
        return True

    def operations(self):
        return [call[0] for call in self.calls]


def make_order_doc(order_id, name='Ada Lovelace', **overrides):
    doc = {
        '_id': order_id,
        '_type': 'order',
        'fullName': name,
        'email': f"{order_id}@example.com",
        'phone': '0123456789',
        'address': '1 Analytical Way',
        'city': 'London',
        'postalCode': 'N1 1AA',
        'country': 'UK',
        'paymentMethod': 'creditCard',
        'paymentStatus': 'paid',
        'amount': 42,
        'createdAt': '2024-05-01T09:30:00.000Z',
        'cartItems': ['A', 'B', 'C'],
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def order_docs():
    return [
        make_order_doc('order-1', 'Ada Lovelace'),
        make_order_doc('order-2', 'Grace Hopper', cartItems=['Compiler']),
        make_order_doc('order-3', 'Alan Turing', cartItems=[]),
    ]


@pytest.fixture
def store(order_docs):
    return FakeStore(order_docs)


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="orderdesk-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(autouse=True)
def no_env_admin_password(monkeypatch):
    """Keep a developer's ADMIN_PASSWORD out of the tests"""
    from orderdesk.core.config import Config
    monkeypatch.setattr(Config, 'ADMIN_PASSWORD', None)
    monkeypatch.delenv('ADMIN_PASSWORD', raising=False)


def build_app(tmp_db_dir, store, admin_password=None):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    app.config["ADMIN_PASSWORD"] = admin_password
    OrderDesk(app, {'brand_name': 'Test Desk'}, store=store)
    return app


@pytest.fixture
def app(tmp_db_dir, store):
    """Fully initialised Flask app with an open admin and a fake store."""
    return build_app(tmp_db_dir, store)


@pytest.fixture
def client(app):
    return app.test_client()

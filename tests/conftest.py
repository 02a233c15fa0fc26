import copy
import json

import pytest
import redis
import requests

from storefront.repos.local_store import LocalStore
from storefront.repos.remote_store import RemoteStore
from storefront.services.notification_service import NotificationService
from storefront.services.reconciliation import ReconciliationEngine
from storefront.services.session import SessionContext
from storefront.services.storefront_service import StorefrontService


class FakeRedis:
    """Minimal in-memory stand-in for the redis client (get / set / delete)."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise redis.ConnectionError("redis is down")

    def get(self, key):
        self._check()
        return self.data.get(key)

    def set(self, name, value):
        self._check()
        self.data[name] = value
        return True

    def delete(self, *keys):
        self._check()
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    def items_under(self, key):
        blob = self.data.get(key)
        return None if blob is None else json.loads(blob)


class FakeDocumentClient:
    """In-memory document store with merge writes and failure injection."""

    def __init__(self) -> None:
        self.docs: dict[str, dict] = {}
        self.get_calls = 0
        self.merge_calls = 0
        self.fail_gets = False
        self.fail_merges = False
        self.fail_merge_on_call: int | None = None
        self.on_get = None
        self.calls: list[str] = []

    def get_document(self, user_id):
        self.get_calls += 1
        self.calls.append("get")
        if self.on_get is not None:
            self.on_get()
        if self.fail_gets:
            raise requests.ConnectionError("document store unreachable")
        doc = self.docs.get(user_id)
        return copy.deepcopy(doc) if doc is not None else None

    def merge_document(self, user_id, fields):
        self.merge_calls += 1
        self.calls.append("merge")
        if self.fail_merges or self.merge_calls == self.fail_merge_on_call:
            raise requests.ConnectionError("document store unreachable")
        self.docs.setdefault(user_id, {}).update(copy.deepcopy(fields))

    def ids(self, user_id, list_name):
        return [entry["id"] for entry in self.docs.get(user_id, {}).get(list_name, [])]


class FakeCatalog:
    def __init__(self, products=None) -> None:
        self.products = products or {}

    def fetch_product(self, product_id):
        if product_id not in self.products:
            raise requests.HTTPError(f"404 for {product_id}")
        return self.products[product_id]


class Recorder:
    """Collects render and notification callbacks."""

    def __init__(self) -> None:
        self.renders = []
        self.messages = []

    def render(self, list_name, items):
        self.renders.append((list_name, [i.id for i in items]))

    def sink(self, message, level):
        self.messages.append((level, message))

    @property
    def levels(self):
        return [level for level, _ in self.messages]


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def documents():
    return FakeDocumentClient()


@pytest.fixture
def local(fake_redis):
    return LocalStore(fake_redis, namespace="")


@pytest.fixture
def remote(documents):
    return RemoteStore(documents)


@pytest.fixture
def context():
    return SessionContext()


@pytest.fixture
def engine(context, local, remote):
    eng = ReconciliationEngine(context=context, local=local, remote=remote)
    eng.start()
    return eng


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def storefront(engine, recorder, catalog):
    return StorefrontService(
        engine=engine,
        notifier=NotificationService(sink=recorder.sink),
        catalog=catalog,
        render=recorder.render,
    )

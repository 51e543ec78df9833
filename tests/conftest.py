"""
Shared fixtures: in-memory stand-ins for the Firestore client and the
Realtime Database reference tree, plus a ready ActionContext.
"""
import copy
import itertools
from datetime import datetime, timezone

import pytest

from admin_app.config import cfg
from admin_app.firebase_db import AdminStore
from admin_agent.actions import _create_action_registry
from admin_agent.registry import ActionContext

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ============== Realtime Database ==============

class FakeReference:
    """Mimics firebase_admin.db.Reference over a nested dict."""

    _push_ids = itertools.count(1)

    def __init__(self, tree: dict, parts=()):
        self._tree = tree
        self._parts = tuple(parts)

    @property
    def key(self):
        return self._parts[-1] if self._parts else None

    @property
    def path(self):
        return "/" + "/".join(self._parts)

    def child(self, path: str) -> "FakeReference":
        extra = [p for p in str(path).split("/") if p]
        return FakeReference(self._tree, self._parts + tuple(extra))

    def get(self):
        node = self._tree
        for p in self._parts:
            if not isinstance(node, dict) or p not in node:
                return None
            node = node[p]
        return copy.deepcopy(node)

    def set(self, value):
        if value is None:
            self.delete()
            return
        if not self._parts:
            self._tree.clear()
            self._tree.update(copy.deepcopy(value))
            return
        node = self._tree
        for p in self._parts[:-1]:
            node = node.setdefault(p, {})
        node[self._parts[-1]] = copy.deepcopy(value)

    def update(self, value: dict):
        if not value:
            raise ValueError("Value argument must be a non-empty dictionary.")
        for k, v in value.items():
            self.child(k).set(v)

    def delete(self):
        node = self._tree
        for p in self._parts[:-1]:
            if not isinstance(node, dict) or p not in node:
                return
            node = node[p]
        if isinstance(node, dict):
            node.pop(self._parts[-1], None)

    def push(self, value=""):
        ref = self.child(f"-N{next(self._push_ids):08d}")
        ref.set(value)
        return ref


# ============== Firestore ==============

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocument:
    def __init__(self, docs: dict, doc_id: str):
        self._docs = docs
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, docs: dict, order=None, limit=None):
        self._docs = docs
        self._order = order
        self._limit = limit

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._docs, (field, direction), self._limit)

    def limit(self, n):
        return FakeQuery(self._docs, self._order, n)

    def stream(self):
        items = list(self._docs.items())
        if self._order:
            field, direction = self._order
            items.sort(key=lambda kv: kv[1].get(field), reverse=(direction == "DESCENDING"))
        if self._limit is not None:
            items = items[: self._limit]
        return iter([FakeSnapshot(k, v) for k, v in items])


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocument(self._docs, doc_id)


class FakeFirestore:
    def __init__(self):
        self.data = {}

    def collection(self, name):
        return FakeCollection(self.data.setdefault(name, {}))


# ============== Fixtures ==============

@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path, monkeypatch):
    """Keep JSONL audit/telemetry files inside the test's tmp dir."""
    monkeypatch.setattr(cfg, "LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(cfg, "AUDIO_DIR", str(tmp_path / "audio"))


@pytest.fixture
def firestore_client():
    return FakeFirestore()


@pytest.fixture
def rtdb_tree():
    return {}


@pytest.fixture
def store(firestore_client, rtdb_tree):
    return AdminStore(firestore_client, FakeReference(rtdb_tree))


@pytest.fixture
def ctx(store):
    return ActionContext(store=store, agent_id="AI_AGENT", clock=lambda: FIXED_NOW)


@pytest.fixture
def registry():
    return _create_action_registry()


@pytest.fixture
def seed_user(store, firestore_client):
    """Put a user into both stores the way the dashboard would."""
    def _seed(user_id="u1", **fields):
        user = {"id": user_id, "name": "Asha", "email": "asha@example.com", "role": "STUDENT", "credits": 5}
        user.update(fields)
        store.write(f"users/{user_id}", user)
        firestore_client.collection("users").document(user_id).set(user)
        return user
    return _seed


@pytest.fixture
def seed_settings(store):
    def _seed(**fields):
        settings = {"appName": "NST", "noticeText": "", "maintenanceMode": False}
        settings.update(fields)
        store.save_system_settings(settings)
        return settings
    return _seed

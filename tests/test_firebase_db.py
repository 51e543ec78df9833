"""
tests/test_firebase_db.py

AdminStore behaviour over the fake SDK objects, and init fallbacks.
"""
from unittest.mock import patch

import pytest

from admin_app import firebase_db
from admin_app.config import cfg
from admin_app.firebase_db import AdminStore


def test_get_all_users_fills_missing_id(store, firestore_client):
    firestore_client.collection("users").document("u7").set({"name": "Ravi"})
    assert store.get_all_users() == [{"name": "Ravi", "id": "u7"}]


def test_settings_roundtrip_and_missing(store):
    assert store.get_settings() is None
    store.save_system_settings({"noticeText": "hello"})
    assert store.get_settings() == {"noticeText": "hello"}


def test_settings_non_dict_is_missing(store):
    store.write("system_settings", "corrupt")
    assert store.get_settings() is None


def test_settings_read_error_is_none(store, monkeypatch):
    def broken(path):
        raise RuntimeError("network")
    monkeypatch.setattr(store, "read", broken)
    assert store.get_settings() is None


def test_save_user_to_live_writes_both(store, firestore_client):
    store.save_user_to_live({"id": "u1", "name": "Asha"})
    assert store.get_live_user("u1") == {"id": "u1", "name": "Asha"}
    assert firestore_client.data["users"]["u1"] == {"id": "u1", "name": "Asha"}


def test_save_user_without_id(store):
    with pytest.raises(ValueError):
        store.save_user_to_live({"name": "nobody"})


def test_patch_and_remove(store):
    store.write("recovery_requests/r1", {"status": "PENDING"})
    store.patch("recovery_requests/r1", {"status": "RESOLVED", "note": "ok"})
    assert store.read("recovery_requests/r1") == {"status": "RESOLVED", "note": "ok"}
    store.remove("recovery_requests/r1")
    assert store.read("recovery_requests/r1") is None


def test_push_returns_key(store):
    key = store.push("queue", {"a": 1})
    assert store.read(f"queue/{key}") == {"a": 1}


def test_chapter_data(store):
    assert store.get_chapter_data("ch1") is None
    store.save_chapter_data("ch1", {"notes": "x"})
    assert store.read("content_data/ch1") == {"notes": "x"}


def test_init_disabled(monkeypatch):
    monkeypatch.setattr(cfg, "FIREBASE_ENABLED", False)
    assert firebase_db.init_firebase() is None


def test_init_failure_is_logged_not_raised(monkeypatch, tmp_path):
    monkeypatch.setattr(cfg, "FIREBASE_ENABLED", True)
    monkeypatch.setattr(cfg, "FIREBASE_KEY_PATH", str(tmp_path / "missing.json"))
    with patch.object(firebase_db.firebase_admin, "get_app", side_effect=ValueError("no app")):
        assert firebase_db.init_firebase() is None


def test_init_builds_store(monkeypatch):
    monkeypatch.setattr(cfg, "FIREBASE_ENABLED", True)
    with patch.object(firebase_db.firebase_admin, "get_app", return_value="app"), \
         patch.object(firebase_db.firestore, "client", return_value="docs") as client, \
         patch.object(firebase_db.rtdb, "reference", return_value="root") as reference:
        store = firebase_db.init_firebase()

    assert isinstance(store, AdminStore)
    assert store.documents == "docs"
    assert store.realtime == "root"
    client.assert_called_once_with("app")
    reference.assert_called_once_with("/", app="app")

# admin_app/firebase_db.py
import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from firebase_admin import db as rtdb

from admin_app.config import cfg

logger = logging.getLogger(__name__)

# Document store collections
USERS_COLL = "users"
INTERACTIONS_COLL = "ai_interactions"

# Realtime tree paths
SETTINGS_PATH = "system_settings"
USERS_PATH = "users"
CONTENT_PATH = "content_data"


def _child_path(*parts: str) -> str:
    """Join path segments for the realtime tree, ignoring empty pieces."""
    return "/".join(str(p).strip("/") for p in parts if p not in (None, ""))


class AdminStore:
    """
    Thin wrapper over the two Firebase stores the dashboard uses.

    `documents` is a Firestore client; `realtime` is the root reference of the
    Realtime Database. Every call is synchronous, like the SDK; async callers
    hop threads themselves.
    """

    def __init__(self, documents, realtime):
        self.documents = documents
        self.realtime = realtime

    # ------------------------
    # Document store
    # ------------------------
    def get_all_users(self) -> list[dict]:
        try:
            out = []
            for snap in self.documents.collection(USERS_COLL).stream():
                data = snap.to_dict() or {}
                data.setdefault("id", snap.id)
                out.append(data)
            return out
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            return []

    def delete_user_doc(self, user_id: str):
        self.documents.collection(USERS_COLL).document(user_id).delete()

    def recent_interactions(self, limit: int = 20) -> list[dict]:
        """Newest AI interaction records first; [] when the query fails."""
        try:
            q = (
                self.documents.collection(INTERACTIONS_COLL)
                .order_by("timestamp", direction=firestore.Query.DESCENDING)
                .limit(limit)
            )
            return [snap.to_dict() or {} for snap in q.stream()]
        except Exception as e:
            logger.warning(f"Could not fetch AI interaction logs: {e}")
            return []

    # ------------------------
    # Realtime tree
    # ------------------------
    def read(self, path: str) -> Any:
        return self.realtime.child(path).get()

    def write(self, path: str, value: Any):
        self.realtime.child(path).set(value)

    def patch(self, path: str, updates: dict):
        self.realtime.child(path).update(updates)

    def remove(self, path: str):
        self.realtime.child(path).delete()

    def push(self, path: str, value: Any) -> str:
        """Append under an auto-generated key; returns the key."""
        return self.realtime.child(path).push(value).key

    # ------------------------
    # Shared helpers
    # ------------------------
    def get_settings(self) -> dict | None:
        try:
            val = self.read(SETTINGS_PATH)
        except Exception as e:
            logger.warning(f"Could not read system settings: {e}")
            return None
        return val if isinstance(val, dict) else None

    def save_system_settings(self, settings: dict):
        self.write(SETTINGS_PATH, settings)

    def get_live_user(self, user_id: str) -> dict | None:
        val = self.read(_child_path(USERS_PATH, user_id))
        return val if isinstance(val, dict) else None

    def save_user_to_live(self, user: dict):
        """Write the full user record to the realtime tree and mirror it into the users document."""
        user_id = user.get("id")
        if not user_id:
            raise ValueError("User record has no id")
        self.write(_child_path(USERS_PATH, user_id), user)
        self.documents.collection(USERS_COLL).document(user_id).set(user)

    def get_chapter_data(self, key: str) -> dict | None:
        val = self.read(_child_path(CONTENT_PATH, key))
        return val if isinstance(val, dict) else None

    def save_chapter_data(self, key: str, data: dict):
        self.write(_child_path(CONTENT_PATH, key), data)


# === Firebase Init ===
_store: AdminStore | None = None


def init_firebase() -> AdminStore | None:
    """Initialise the default Firebase app; returns None (logged) when it can't."""
    if not cfg.FIREBASE_ENABLED:
        logger.info("Firebase disabled via FIREBASE_ENABLED")
        return None
    try:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            cred = credentials.Certificate(cfg.FIREBASE_KEY_PATH)
            app = firebase_admin.initialize_app(cred, {"databaseURL": cfg.FIREBASE_DATABASE_URL})
        store = AdminStore(firestore.client(app), rtdb.reference("/", app=app))
        logger.info(f"✅ Firebase initialized from {cfg.FIREBASE_KEY_PATH}")
        return store
    except Exception as e:
        logger.error(f"❌ Firebase init failed: {e}")
        return None


def get_store() -> AdminStore | None:
    global _store
    if _store is None:
        _store = init_firebase()
    return _store

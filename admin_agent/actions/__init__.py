"""
admin_agent/actions

Admin action handlers, grouped by the record they touch.

Usage:
    from admin_agent.actions import get_action_registry, default_context

    registry = get_action_registry()
    msg = await registry.dispatch("ban_user", {"user_id": "u1"}, default_context())
"""
import logging

from admin_agent.registry import ActionContext, ActionRegistry
from admin_app.firebase_db import get_store

logger = logging.getLogger(__name__)

_action_registry: ActionRegistry | None = None


def _create_action_registry() -> ActionRegistry:
    registry = ActionRegistry()

    from admin_agent.actions import (
        user_actions,
        settings_actions,
        gift_actions,
        content_actions,
        system_actions,
    )

    user_actions.register_user_actions(registry)
    settings_actions.register_settings_actions(registry)
    gift_actions.register_gift_actions(registry)
    content_actions.register_content_actions(registry)
    system_actions.register_system_actions(registry)

    logger.info(f"ActionRegistry initialized with {len(registry.list_actions())} actions")
    return registry


def get_action_registry() -> ActionRegistry:
    global _action_registry
    if _action_registry is None:
        _action_registry = _create_action_registry()
    return _action_registry


def default_context() -> ActionContext:
    """Context bound to the process-wide Firebase store."""
    store = get_store()
    if store is None:
        raise RuntimeError("Firebase is not available; check FIREBASE_KEY_PATH and FIREBASE_DATABASE_URL")
    return ActionContext(store=store)

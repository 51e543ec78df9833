"""
admin_agent/actions/common.py

Read-modify-write helpers shared by the action modules.

None of this is transactional: a user or settings record is read, patched in
memory and written back whole, so two concurrent writers can overwrite each
other.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from admin_agent.registry import ActionContext, ActionError, SettingsNotFoundError, UserNotFoundError


def iso(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def shallow_merge(current: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Top-level merge; a None value removes the key."""
    merged = {**current, **updates}
    return {k: v for k, v in merged.items() if v is not None}


async def load_user(ctx: ActionContext, user_id: str) -> Dict[str, Any]:
    user = await asyncio.to_thread(ctx.store.get_live_user, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def load_settings(ctx: ActionContext) -> Dict[str, Any]:
    settings = await asyncio.to_thread(ctx.store.get_settings)
    if settings is None:
        raise SettingsNotFoundError()
    return settings


async def save_settings(ctx: ActionContext, settings: Dict[str, Any]):
    await asyncio.to_thread(ctx.store.save_system_settings, settings)


async def merge_user(ctx: ActionContext, user_id: str, updates: Dict[str, Any]) -> str:
    """Merge `updates` onto the live user record and persist it to both stores."""
    try:
        current = await load_user(ctx, user_id)
        updated = shallow_merge(current, updates)
        updated.setdefault("id", user_id)
        await asyncio.to_thread(ctx.store.save_user_to_live, updated)
    except Exception as e:
        raise ActionError(f"Failed to update user: {e}") from e
    return f"User {user_id} updated."


async def merge_settings(ctx: ActionContext, updates: Dict[str, Any]) -> Dict[str, Any]:
    settings = await load_settings(ctx)
    merged = shallow_merge(settings, updates)
    await save_settings(ctx, merged)
    return merged

"""
admin_agent/actions/user_actions.py

User management actions: delete, update, ban, subscriptions, inbox, roles.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from admin_agent.registry import ActionContext, ActionError, ActionRegistry
from admin_agent.schemas import (
    BanUserParams,
    GrantSubscriptionParams,
    InboxMessageParams,
    RecoveryRequestParams,
    ScanUsersParams,
    UpdateUserParams,
    UserIdParams,
)
from admin_agent.actions.common import iso, load_user, merge_user
from admin_app.config import cfg

logger = logging.getLogger(__name__)

# None means the plan never ends
PLAN_DAYS: Dict[str, Optional[int]] = {
    "WEEKLY": 7,
    "MONTHLY": 30,
    "YEARLY": 365,
    "LIFETIME": None,
}

SUB_ADMIN_PERMISSIONS = ["MANAGE_SUBS"]


def _parse_time(value: Any) -> Optional[datetime]:
    """lastActiveTime is stored either as an ISO string or epoch milliseconds."""
    if value in (None, ""):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def filter_users(users: List[Dict[str, Any]], mode: str, now: datetime) -> List[Dict[str, Any]]:
    if mode == "PREMIUM":
        return [u for u in users if u.get("isPremium")]
    if mode == "FREE":
        return [u for u in users if not u.get("isPremium")]
    if mode == "INACTIVE":
        cutoff = now - timedelta(days=cfg.INACTIVE_AFTER_DAYS)
        out = []
        for u in users:
            raw = u.get("lastActiveTime")
            if not raw:
                out.append(u)
                continue
            # an unreadable timestamp does not count as inactive
            seen = _parse_time(raw)
            if seen is not None and seen < cutoff:
                out.append(u)
        return out
    return list(users)


def summarize_user(u: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": u.get("id"),
        "name": u.get("name"),
        "email": u.get("email"),
        "role": u.get("role"),
        "credits": u.get("credits"),
        "tier": u.get("subscriptionTier"),
    }


def register_user_actions(registry: ActionRegistry) -> None:

    @registry.register("delete_user", "Delete a user permanently.", UserIdParams)
    async def delete_user(params: UserIdParams, ctx: ActionContext) -> str:
        uid = params.user_id
        try:
            await asyncio.to_thread(ctx.store.delete_user_doc, uid)
            await asyncio.to_thread(ctx.store.remove, f"users/{uid}")
        except Exception as e:
            raise ActionError(f"Failed to delete user {uid}: {e}") from e
        return f"User {uid} deleted successfully from Firestore and RTDB."

    @registry.register("update_user", "Update user details (credits, etc).", UpdateUserParams)
    async def update_user(params: UpdateUserParams, ctx: ActionContext) -> str:
        return await merge_user(ctx, params.user_id, params.updates)

    @registry.register("ban_user", "Ban a user.", BanUserParams)
    async def ban_user(params: BanUserParams, ctx: ActionContext) -> str:
        updates: Dict[str, Any] = {"isLocked": True}
        if params.reason and params.reason.strip():
            updates["lockReason"] = params.reason.strip()
        return await merge_user(ctx, params.user_id, updates)

    @registry.register("unban_user", "Unban a user.", UserIdParams)
    async def unban_user(params: UserIdParams, ctx: ActionContext) -> str:
        return await merge_user(ctx, params.user_id, {"isLocked": False})

    @registry.register("grant_subscription", "Give a premium subscription.", GrantSubscriptionParams)
    async def grant_subscription(params: GrantSubscriptionParams, ctx: ActionContext) -> str:
        now = ctx.now()
        days = PLAN_DAYS[params.plan]
        end_date = iso(now + timedelta(days=days)) if days is not None else None

        entry = {
            "id": f"grant-{ctx.now_ms()}",
            "tier": params.plan,
            "level": params.level,
            "startDate": iso(now),
            "endDate": end_date or "LIFETIME",
            "durationHours": 0,
            "price": 0,
            "originalPrice": 0,
            "isFree": True,
            "grantSource": "ADMIN",
            "grantedBy": ctx.agent_id,
        }

        user = await load_user(ctx, params.user_id)
        history = [entry] + list(user.get("subscriptionHistory") or [])

        return await merge_user(ctx, params.user_id, {
            "subscriptionTier": params.plan,
            "subscriptionLevel": params.level,
            "subscriptionEndDate": end_date,
            "isPremium": True,
            "subscriptionHistory": history,
            "grantedByAdmin": True,
        })

    @registry.register("send_inbox_message", "Send private message.", InboxMessageParams)
    async def send_inbox_message(params: InboxMessageParams, ctx: ActionContext) -> str:
        user = await load_user(ctx, params.user_id)
        msg = {
            "id": f"msg-{ctx.now_ms()}",
            "text": params.text,
            "date": iso(ctx.now()),
            "read": False,
            "type": "TEXT",
        }
        inbox = [msg] + list(user.get("inbox") or [])
        await merge_user(ctx, params.user_id, {"inbox": inbox})
        return f"Message sent to {user.get('name') or params.user_id}."

    @registry.register("scan_users", "List users.", ScanUsersParams, category="query")
    async def scan_users(params: ScanUsersParams, ctx: ActionContext) -> List[Dict[str, Any]]:
        users = await asyncio.to_thread(ctx.store.get_all_users)
        return [summarize_user(u) for u in filter_users(users, params.filter, ctx.now())]

    @registry.register("promote_sub_admin", "Make user a Sub-Admin.", UserIdParams)
    async def promote_sub_admin(params: UserIdParams, ctx: ActionContext) -> str:
        return await merge_user(ctx, params.user_id, {
            "role": "SUB_ADMIN",
            "isSubAdmin": True,
            "permissions": list(SUB_ADMIN_PERMISSIONS),
        })

    @registry.register("demote_sub_admin", "Remove Sub-Admin rights.", UserIdParams)
    async def demote_sub_admin(params: UserIdParams, ctx: ActionContext) -> str:
        return await merge_user(ctx, params.user_id, {
            "role": "STUDENT",
            "isSubAdmin": False,
            "permissions": [],
        })

    @registry.register(
        "approve_recovery_request",
        "Resolve an account recovery request and enable passwordless login for the user.",
        RecoveryRequestParams,
        exposed=False,
    )
    async def approve_recovery_request(params: RecoveryRequestParams, ctx: ActionContext) -> str:
        rid = params.request_id
        await asyncio.to_thread(ctx.store.patch, f"recovery_requests/{rid}", {"status": "RESOLVED"})
        await merge_user(ctx, rid, {"isPasswordless": True})
        return f"Request {rid} approved."

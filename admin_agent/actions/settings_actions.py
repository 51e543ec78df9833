"""
admin_agent/actions/settings_actions.py

Actions that edit the shared system settings record.
"""
import asyncio
import logging
from typing import Any, Dict

from admin_agent.registry import ActionContext, ActionRegistry
from admin_agent.schemas import (
    AddPackageParams,
    BroadcastParams,
    RemovePackageParams,
    SettingsUpdateParams,
    ToggleSettingParams,
    WeeklyTestParams,
)
from admin_agent.actions.common import iso, load_settings, merge_settings, save_settings
from admin_app.config import cfg

logger = logging.getLogger(__name__)

WEEKLY_TEST_PASSING_SCORE = 40
WEEKLY_TEST_DURATION_MINUTES = 60


def register_settings_actions(registry: ActionRegistry) -> None:

    @registry.register("broadcast_message", "Set a global banner message.", BroadcastParams)
    async def broadcast_message(params: BroadcastParams, ctx: ActionContext) -> str:
        settings = await asyncio.to_thread(ctx.store.get_settings)
        if not settings:
            return "Failed to fetch settings."
        await save_settings(ctx, {**settings, "noticeText": params.message})
        return "Broadcast banner updated successfully."

    @registry.register(
        "create_weekly_test",
        "Create an active weekly test with no questions yet.",
        WeeklyTestParams,
        exposed=False,
    )
    async def create_weekly_test(params: WeeklyTestParams, ctx: ActionContext) -> str:
        settings = await load_settings(ctx)
        test: Dict[str, Any] = {
            "id": f"test-{ctx.now_ms()}",
            "name": params.name,
            "description": f"Subject: {params.subject}",
            "isActive": True,
            "classLevel": cfg.DEFAULT_CLASS_LEVEL,
            "questions": [],
            "totalQuestions": params.question_count,
            "passingScore": WEEKLY_TEST_PASSING_SCORE,
            "createdAt": iso(ctx.now()),
            "durationMinutes": WEEKLY_TEST_DURATION_MINUTES,
            "selectedSubjects": [params.subject],
        }
        tests = list(settings.get("weeklyTests") or []) + [test]
        await save_settings(ctx, {**settings, "weeklyTests": tests})
        return f'Weekly Test "{params.name}" created (Empty Questions).'

    @registry.register(
        "update_system_settings",
        "Merge fields onto the system settings.",
        SettingsUpdateParams,
        exposed=False,
    )
    async def update_system_settings(params: SettingsUpdateParams, ctx: ActionContext) -> str:
        await merge_settings(ctx, params.updates)
        return "Settings updated."

    @registry.register(
        "toggle_setting",
        "Toggle a system boolean setting (maintenance, ai, autopilot).",
        ToggleSettingParams,
    )
    async def toggle_setting(params: ToggleSettingParams, ctx: ActionContext) -> str:
        await merge_settings(ctx, {params.key: params.value})
        return "Settings updated."

    @registry.register("add_package", "Add a credit package to the store.", AddPackageParams, exposed=False)
    async def add_package(params: AddPackageParams, ctx: ActionContext) -> str:
        settings = await load_settings(ctx)
        pkg = {
            "id": f"pkg-{ctx.now_ms()}",
            "name": params.name,
            "price": params.price,
            "credits": params.credits,
        }
        packages = list(settings.get("packages") or []) + [pkg]
        await save_settings(ctx, {**settings, "packages": packages})
        return f"Package {params.name} added."

    @registry.register("remove_package", "Remove a credit package by id.", RemovePackageParams, exposed=False)
    async def remove_package(params: RemovePackageParams, ctx: ActionContext) -> str:
        settings = await load_settings(ctx)
        packages = [p for p in (settings.get("packages") or []) if p.get("id") != params.package_id]
        await save_settings(ctx, {**settings, "packages": packages})
        return f"Package {params.package_id} removed."

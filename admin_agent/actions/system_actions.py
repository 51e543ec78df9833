"""
admin_agent/actions/system_actions.py

Auto-Pilot trigger. The content generator itself runs elsewhere; by default a
cycle request is queued under `autopilot_queue` for the worker to pick up.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict

from admin_agent.registry import ActionContext, ActionRegistry, AutoPilotRunner
from admin_agent.schemas import NoParams
from admin_agent.actions.common import iso

logger = logging.getLogger(__name__)

AUTOPILOT_QUEUE_PATH = "autopilot_queue"
AUTOPILOT_BATCH_SIZE = 5


def make_queue_runner(store, requested_by: str, now: Callable[[], datetime]) -> AutoPilotRunner:
    """Runner that enqueues one forced cycle instead of generating content in-process."""

    async def _run(settings: Dict[str, Any], on_log: Callable[[str], None]) -> str:
        request = {
            "requestedAt": iso(now()),
            "requestedBy": requested_by,
            "force": True,
            "batchSize": AUTOPILOT_BATCH_SIZE,
            "existingTopics": [],
        }
        key = await asyncio.to_thread(store.push, AUTOPILOT_QUEUE_PATH, request)
        on_log(f"Auto-Pilot cycle queued as {key}")
        return key

    return _run


def register_system_actions(registry: ActionRegistry) -> None:

    @registry.register(
        "run_auto_pilot",
        "Trigger AI Auto-Pilot once.",
        NoParams,
        category="system",
    )
    async def run_auto_pilot(params: NoParams, ctx: ActionContext) -> str:
        settings = await asyncio.to_thread(ctx.store.get_settings)
        if not settings:
            return "Settings failure."
        runner = ctx.autopilot or make_queue_runner(ctx.store, ctx.agent_id, ctx.now)
        await runner(settings, logger.info)
        return "Auto-Pilot cycle triggered."

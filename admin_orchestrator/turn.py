# admin_orchestrator/turn.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set
import asyncio
import json
import logging

from admin_app.config import cfg
from admin_app.llm import chat_with_tools
from admin_app.telemetry import log_event
from admin_app.text_utils import strip_role_blocks
from admin_agent.actions import default_context, get_action_registry
from admin_agent.registry import ActionContext, ActionRegistry

logger = logging.getLogger(__name__)

UNAVAILABLE_REPLY = "The admin assistant is unavailable right now. Please try again shortly."

ChatFn = Callable[[List[Dict[str, Any]], Optional[List[Dict[str, Any]]]], Optional[Dict[str, Any]]]


@dataclass
class ToolOutcome:
    name: str
    args: Dict[str, Any]
    result: Dict[str, Any]


@dataclass
class TurnResult:
    reply: str
    tool_calls: List[ToolOutcome] = field(default_factory=list)

    @property
    def used_tools(self) -> List[str]:
        return [t.name for t in self.tool_calls]


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def _to_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, default=str)


def _parse_args(raw: Any) -> Dict[str, Any]:
    """Tool arguments arrive as a JSON string; some models send an object."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("tool arguments must be a JSON object")
    return parsed


async def _dispatch_tool(
    registry: ActionRegistry,
    ctx: Optional[ActionContext],
    call: Dict[str, Any],
    allowed: Set[str],
    ctx_error: str = "",
) -> ToolOutcome:
    """Run one model tool call; failures become {"ok": False, "error": ...}."""
    fn = call.get("function") or {}
    name = fn.get("name") or ""
    try:
        args = _parse_args(fn.get("arguments"))
    except ValueError as e:
        return ToolOutcome(name=name, args={}, result={"ok": False, "error": f"bad arguments: {e}"})

    # only the tools offered to the model may be called by it
    if name not in allowed:
        result = {"ok": False, "error": f"Unknown tool: {name}. Available tools: {', '.join(sorted(allowed))}"}
    elif ctx is None:
        result = {"ok": False, "error": ctx_error}
    else:
        try:
            value = await registry.dispatch(name, args, ctx)
            result = {"ok": True, "result": value}
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e}")
            result = {"ok": False, "error": str(e)}

    log_event("tool_call", {"name": name, "args": args, "ok": result["ok"]})
    return ToolOutcome(name=name, args=args, result=result)


def _summarize(outcomes: List[ToolOutcome]) -> str:
    """Plain-text reply built from tool results when the model can't finish the turn."""
    if not outcomes:
        return UNAVAILABLE_REPLY
    parts = []
    for o in outcomes:
        if o.result.get("ok"):
            value = o.result.get("result")
            parts.append(value if isinstance(value, str) else f"{o.name}: {_to_json(value)}")
        else:
            parts.append(f"{o.name} failed: {o.result.get('error')}")
    return " ".join(parts)


# ---------------------------------------------------------
# Public: one function the CLI calls per admin command
# ---------------------------------------------------------
async def handle_admin_command(
    text: str,
    history_ref: Optional[List[Dict[str, str]]] = None,
    registry: Optional[ActionRegistry] = None,
    ctx: Optional[ActionContext] = None,
    chat: ChatFn = chat_with_tools,
) -> TurnResult:
    """
    The central loop for a single admin command.
    - Sends system prompt + history + the command, with the exposed tools
    - Dispatches every tool call the model makes and feeds the results back
    - Stops when the model answers in plain text or LLM_MAX_TOOL_ROUNDS is hit
    Returns TurnResult (text + tool outcomes). Does NOT speak.
    """
    registry = registry or get_action_registry()
    tools = registry.export_tools()
    allowed = {t["function"]["name"] for t in tools}
    ctx_error = ""
    history = history_ref if history_ref is not None else []

    messages: List[Dict[str, Any]] = [{"role": "system", "content": cfg.SYSTEM_PROMPT}]
    messages += history[-(cfg.CONTEXT_TURNS * 2):]
    messages.append({"role": "user", "content": text})

    outcomes: List[ToolOutcome] = []
    reply: Optional[str] = None

    for round_no in range(cfg.LLM_MAX_TOOL_ROUNDS + 1):
        msg = await asyncio.to_thread(chat, messages, tools)
        log_event("llm_round", {"round": round_no, "ok": msg is not None})
        if msg is None:
            break

        calls = msg.get("tool_calls") or []
        if not calls:
            reply = strip_role_blocks(msg.get("content") or "")
            break
        if round_no == cfg.LLM_MAX_TOOL_ROUNDS:
            logger.warning("Tool round limit reached; answering from tool results")
            break

        if ctx is None and not ctx_error:
            try:
                ctx = default_context()
            except RuntimeError as e:
                logger.error(f"No action context: {e}")
                ctx_error = str(e)

        messages.append({"role": "assistant", "content": msg.get("content"), "tool_calls": calls})
        for call in calls:
            outcome = await _dispatch_tool(registry, ctx, call, allowed, ctx_error)
            outcomes.append(outcome)
            messages.append({
                "role": "tool",
                "tool_call_id": call.get("id", ""),
                "name": outcome.name,
                "content": _to_json(outcome.result),
            })

    if not reply:
        reply = _summarize(outcomes)

    history.append({"role": "user", "content": text})
    history.append({"role": "assistant", "content": reply})
    return TurnResult(reply=reply, tool_calls=outcomes)

"""
tests/test_registry.py

Unit tests for ActionDefinition and ActionRegistry.
"""
import asyncio
import json
import os

import pytest
from pydantic import BaseModel, Field, ValidationError

from admin_app.config import cfg
from admin_agent.registry import ActionContext, ActionDefinition, ActionError, ActionRegistry


class EchoParams(BaseModel):
    """Test parameter model"""
    name: str = Field(..., description="Name field")
    count: int = Field(default=1, description="Count field")


async def _echo(params: EchoParams, ctx) -> str:
    return f"{params.name} x{params.count}"


class TestActionDefinition:

    def test_to_tool(self):
        definition = ActionDefinition(
            name="echo",
            description="Echo a name",
            category="query",
            parameters_schema=EchoParams,
            handler=_echo,
        )

        tool = definition.to_tool()

        assert tool["type"] == "function"
        assert tool["function"]["name"] == "echo"
        assert tool["function"]["description"] == "Echo a name"
        params = tool["function"]["parameters"]
        assert params["type"] == "object"
        assert params["required"] == ["name"]
        assert params["properties"]["count"]["default"] == 1

    def test_to_dict(self):
        definition = ActionDefinition("echo", "Echo", "query", EchoParams, _echo, exposed=False)
        assert definition.to_dict() == {
            "name": "echo",
            "description": "Echo",
            "category": "query",
            "exposed": False,
        }


class TestActionRegistry:

    def _registry(self):
        registry = ActionRegistry()
        registry.register("echo", "Echo a name", EchoParams, category="query")(_echo)

        @registry.register("hidden", "Internal only", EchoParams, exposed=False)
        async def hidden(params, ctx):
            return "hidden"

        @registry.register("boom", "Always fails", EchoParams)
        async def boom(params, ctx):
            raise ActionError("Failed to do the thing: backend down")

        return registry

    def test_register_and_get(self):
        registry = self._registry()
        assert registry.get("echo").handler is _echo
        assert registry.get("missing") is None
        assert registry.names() == ["echo", "hidden", "boom"]

    def test_duplicate_registration_rejected(self):
        registry = self._registry()
        with pytest.raises(ValueError):
            registry.register("echo", "again", EchoParams)(_echo)

    def test_export_tools_skips_hidden(self):
        names = [t["function"]["name"] for t in self._registry().export_tools()]
        assert names == ["echo", "boom"]

    def test_dispatch_validates_and_runs(self, ctx):
        result = asyncio.run(self._registry().dispatch("echo", {"name": "Asha", "count": "3"}, ctx))
        assert result == "Asha x3"

    def test_dispatch_unknown_action(self, ctx):
        with pytest.raises(ValueError, match="Unknown action: nope"):
            asyncio.run(self._registry().dispatch("nope", {}, ctx))

    def test_dispatch_bad_params(self, ctx):
        with pytest.raises(ValidationError):
            asyncio.run(self._registry().dispatch("echo", {"count": 2}, ctx))

    def test_dispatch_propagates_action_error(self, ctx):
        with pytest.raises(ActionError, match="backend down"):
            asyncio.run(self._registry().dispatch("boom", {"name": "x"}, ctx))

    def test_dispatch_writes_audit_trail(self, ctx):
        registry = self._registry()
        asyncio.run(registry.dispatch("echo", {"name": "Asha"}, ctx))
        with pytest.raises(ActionError):
            asyncio.run(registry.dispatch("boom", {"name": "x"}, ctx))

        files = [f for f in os.listdir(cfg.LOGS_DIR) if f.startswith("actions_")]
        assert len(files) == 1
        with open(os.path.join(cfg.LOGS_DIR, files[0]), encoding="utf-8") as f:
            records = [json.loads(line) for line in f]

        assert [r["action"] for r in records] == ["echo", "boom"]
        assert records[0]["ok"] is True
        assert records[0]["message"] == "Asha x1"
        assert records[0]["params"] == {"name": "Asha", "count": 1}
        assert records[1]["ok"] is False
        assert "backend down" in records[1]["message"]


def test_context_clock(ctx):
    assert ctx.now().year == 2026
    assert ctx.now_ms() == int(ctx.now().timestamp() * 1000)


def test_context_defaults(store):
    ctx = ActionContext(store=store)
    assert ctx.agent_id == cfg.ACTION_AGENT_ID
    assert ctx.now().tzinfo is not None
    assert ctx.autopilot is None

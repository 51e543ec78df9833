"""
admin_agent/registry.py

Action registration and dispatch.

Actions are async handlers taking a validated pydantic params model and an
ActionContext. Registering an action also yields its tool descriptor, so the
language model sees exactly the parameters the handler validates.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Type
import logging

from pydantic import BaseModel, ValidationError

from admin_app.config import cfg
from admin_app.logging_utils import log_action

logger = logging.getLogger(__name__)


ActionCategory = Literal["query", "mutation", "system"]

# (settings, on_log) -> awaitable; runs one autopilot cycle
AutoPilotRunner = Callable[[Dict[str, Any], Callable[[str], None]], Awaitable[Any]]


class ActionError(RuntimeError):
    """An action could not complete; the message is meant for the admin."""


class UserNotFoundError(ActionError):
    def __init__(self, user_id: str = ""):
        super().__init__("User not found")
        self.user_id = user_id


class SettingsNotFoundError(ActionError):
    def __init__(self):
        super().__init__("Settings not found")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActionContext:
    """
    Everything a handler needs besides its parameters.

    Attributes:
        store: AdminStore (or anything with the same methods)
        agent_id: recorded as `grantedBy` on admin grants
        clock: returns the current aware datetime
        autopilot: runner invoked by run_auto_pilot; None disables it
    """
    store: Any
    agent_id: str = field(default_factory=lambda: cfg.ACTION_AGENT_ID)
    clock: Callable[[], datetime] = _utcnow
    autopilot: Optional[AutoPilotRunner] = None

    def now(self) -> datetime:
        return self.clock()

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)


Handler = Callable[[BaseModel, ActionContext], Awaitable[Any]]


@dataclass
class ActionDefinition:
    name: str
    description: str
    category: ActionCategory
    parameters_schema: Type[BaseModel]
    handler: Handler
    exposed: bool = True

    def to_tool(self) -> Dict[str, Any]:
        """
        OpenAI-style function descriptor:
            {"type": "function", "function": {"name", "description", "parameters"}}
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema.model_json_schema(),
            },
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "exposed": self.exposed,
        }


class ActionRegistry:
    """
    Central registry of admin actions.

    Usage:
        registry = ActionRegistry()

        @registry.register("ban_user", "Ban a user.", BanUserParams)
        async def ban_user(params: BanUserParams, ctx: ActionContext) -> str:
            ...

        result = await registry.dispatch("ban_user", {"user_id": "u1"}, ctx)
    """

    def __init__(self):
        self._actions: Dict[str, ActionDefinition] = {}

    def register(
        self,
        name: str,
        description: str,
        params: Type[BaseModel],
        category: ActionCategory = "mutation",
        exposed: bool = True,
    ) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            if name in self._actions:
                raise ValueError(f"Action already registered: {name}")
            self._actions[name] = ActionDefinition(
                name=name,
                description=description,
                category=category,
                parameters_schema=params,
                handler=func,
                exposed=exposed,
            )
            logger.debug(f"Registered action: {name} (category={category}, exposed={exposed})")
            return func

        return decorator

    def get(self, name: str) -> Optional[ActionDefinition]:
        return self._actions.get(name)

    def list_actions(self) -> List[ActionDefinition]:
        return list(self._actions.values())

    def names(self) -> List[str]:
        return list(self._actions.keys())

    def export_tools(self) -> List[Dict[str, Any]]:
        """Tool descriptors for exposed actions, in registration order."""
        return [a.to_tool() for a in self._actions.values() if a.exposed]

    async def dispatch(self, name: str, args: Optional[Dict[str, Any]], ctx: ActionContext) -> Any:
        """
        Validate `args` against the action's params model and run it.

        Raises:
            ValueError: unknown action
            ValidationError: arguments don't match the schema
            ActionError: the action itself failed
        """
        action = self.get(name)
        if action is None:
            raise ValueError(f"Unknown action: {name}. Available actions: {', '.join(self._actions)}")

        try:
            params = action.parameters_schema(**(args or {}))
        except ValidationError as e:
            logger.warning(f"Parameter validation failed for {name}: {e}")
            raise

        dumped = params.model_dump()
        logger.info(f"Dispatching action: {name} with params: {dumped}")
        try:
            result = await action.handler(params, ctx)
        except Exception as e:
            log_action(name, dumped, ok=False, message=str(e))
            raise
        log_action(name, dumped, ok=True, message=result if isinstance(result, str) else "")
        return result

# admin_agent/tools.py
"""Tool descriptors handed to the language model."""
import copy
from typing import Any, Dict, List

from admin_agent.actions import get_action_registry

ADMIN_TOOLS: List[Dict[str, Any]] = get_action_registry().export_tools()


def get_admin_tools() -> List[Dict[str, Any]]:
    return copy.deepcopy(ADMIN_TOOLS)


def tool_names() -> List[str]:
    return [t["function"]["name"] for t in ADMIN_TOOLS]

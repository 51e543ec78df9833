# admin_app/llm.py

import time
import logging
import requests
from typing import Any, Dict, List, Optional

from admin_app.config import cfg

logger = logging.getLogger(__name__)

_last_llm_fail: float = 0.0


# ----------------------------
# Helpers
# ----------------------------
def _headers() -> dict:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg.GROQ_API_KEY}"
    }


def _timeout(read_timeout: Optional[float] = None) -> tuple:
    return (cfg.LLM_CONNECT_TIMEOUT, read_timeout or cfg.LLM_READ_TIMEOUT)


def llm_is_up(retries: int = 1, wait_per_try: float = 1.0) -> bool:
    """Check if the Groq backend answers a tiny ping."""
    global _last_llm_fail

    if not cfg.GROQ_API_KEY:
        logger.warning("GROQ_API_KEY is not set")
        return False

    if (time.time() - _last_llm_fail) < cfg.LLM_HEALTHCHECK_SECONDS:
        logger.debug("⏳ Skipping LLM check (within cooldown)")
        return False

    payload = {
        "model": cfg.GROQ_MODEL,
        "messages": [{"role": "user", "content": "ping"}],
        "temperature": 0.0,
        "max_tokens": 5
    }

    for attempt in range(1, retries + 1):
        try:
            r = requests.post(cfg.GROQ_API_URL, headers=_headers(), json=payload, timeout=_timeout(10))
            if r.status_code == 200:
                return True
            logger.warning(f"⚠️ Healthcheck HTTP {r.status_code}: {r.text}")
        except Exception as e:
            logger.warning(f"❌ Healthcheck error: {e}")

        if attempt < retries:
            time.sleep(wait_per_try)

    _last_llm_fail = time.time()  # only set if all attempts fail
    return False


# ----------------------------
# Chat with tool calling
# ----------------------------
def chat_with_tools(
    messages: List[Dict[str, Any]],
    tools: Optional[List[Dict[str, Any]]] = None,
    read_timeout: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """
    Send one chat-completions request; return the assistant message
    (may carry `tool_calls`) or None when the call fails.
    """
    payload: Dict[str, Any] = {
        "model": cfg.GROQ_MODEL,
        "temperature": cfg.LLM_TEMPERATURE,
        "max_tokens": cfg.LLM_MAX_TOKENS,
        "messages": messages,
    }
    if tools:
        payload["tools"] = tools
        payload["tool_choice"] = "auto"

    try:
        r = requests.post(cfg.GROQ_API_URL, headers=_headers(), json=payload, timeout=_timeout(read_timeout))
        if r.status_code == 200:
            j = r.json()
            return (j.get("choices") or [{}])[0].get("message")
        logger.warning(f"⚠️ Groq LLM error {r.status_code}: {r.text}")
    except Exception as e:
        logger.warning(f"❌ Exception during Groq LLM call: {e}")

    return None
